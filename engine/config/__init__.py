"""
Config Module

YAML / environment configuration loading and validation.
"""

from .loader import ConfigLoader, ServiceConfig, SinkConfig, StorageConfig, load_config

__all__ = [
    "ConfigLoader",
    "ServiceConfig",
    "SinkConfig",
    "StorageConfig",
    "load_config",
]
