"""
Adapters

Clients for the external services the candle store talks to:
- Redis: list/scalar key-value backend
- NATS: tick intake from price feed collectors
"""

from dataflow.adapters.nats_client import NatsClient, NatsConfig, Topics
from dataflow.adapters.redis_client import Backend, RedisClient, RedisConfig

__all__ = [
    "Backend",
    "NatsClient",
    "NatsConfig",
    "RedisClient",
    "RedisConfig",
    "Topics",
]
