"""
Config Loader

Loads the candle store service configuration from a YAML file or from
environment variables. Connection settings for Redis and NATS come from
RedisConfig.from_env / NatsConfig.from_env.

Example config.yaml:

    symbols:
      - SOL/USD
      - BTC/USD
    storage:
      on_decode_error: fail
      aggregation: sweep
    sink:
      subject: ticks.raw.*
      queue: candle-store
    log_level: INFO
"""

import logging
import os
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class StorageConfig(BaseModel):
    """Candle store behaviour shared by every symbol"""
    on_decode_error: Literal["fail", "skip"] = "fail"
    aggregation: Literal["sweep", "scan"] = "sweep"


class SinkConfig(BaseModel):
    """NATS tick intake"""
    subject: str = "ticks.raw.*"
    queue: Optional[str] = None


class ServiceConfig(BaseModel):
    """Complete candle store service configuration"""
    symbols: List[str]
    storage: StorageConfig = Field(default_factory=StorageConfig)
    sink: SinkConfig = Field(default_factory=SinkConfig)
    log_level: str = "INFO"

    @field_validator("symbols")
    @classmethod
    def _symbols_not_empty(cls, symbols: List[str]) -> List[str]:
        symbols = [s.strip() for s in symbols if s.strip()]
        if not symbols:
            raise ValueError("at least one symbol is required")
        if len(set(symbols)) != len(symbols):
            raise ValueError(f"duplicate symbols: {symbols}")
        return symbols

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, level: str) -> str:
        level = level.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {level}")
        return level

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """
        Build config from environment variables.

        Environment Variables:
            SYMBOLS: Comma-separated symbols (default: "SOL/USD")
            ON_DECODE_ERROR: "fail" or "skip" (default: "fail")
            AGGREGATION: "sweep" or "scan" (default: "sweep")
            TICK_SUBJECT: NATS subject (default: "ticks.raw.*")
            TICK_QUEUE: NATS queue group (default: none)
            LOG_LEVEL: Logging level (default: "INFO")
        """
        return cls(
            symbols=os.getenv("SYMBOLS", "SOL/USD").split(","),
            storage=StorageConfig(
                on_decode_error=os.getenv("ON_DECODE_ERROR", "fail"),
                aggregation=os.getenv("AGGREGATION", "sweep"),
            ),
            sink=SinkConfig(
                subject=os.getenv("TICK_SUBJECT", "ticks.raw.*"),
                queue=os.getenv("TICK_QUEUE") or None,
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


class ConfigLoader:
    """
    Loads ServiceConfig from YAML.

    Example usage:
        loader = ConfigLoader(Path("config.yaml"))
        config = loader.load()
    """

    def __init__(self, config_file: Path):
        self.config_file = Path(config_file)

    def load(self) -> ServiceConfig:
        """
        Load and validate the config file.

        Raises:
            ValueError: If the file is missing, not YAML, or fails validation
        """
        if not self.config_file.exists():
            raise ValueError(f"Config file not found: {self.config_file}")

        try:
            with open(self.config_file) as f:
                raw = yaml.safe_load(f) or {}
            config = ServiceConfig(**raw)
        except (yaml.YAMLError, ValidationError, TypeError) as e:
            logger.error(f"Failed to load {self.config_file}: {e}")
            raise ValueError(f"Failed to load {self.config_file}: {e}") from e

        logger.info(
            f"Loaded config from {self.config_file.name}: "
            f"{len(config.symbols)} symbols, storage={config.storage.model_dump()}"
        )
        return config


def load_config(config_file: Optional[str] = None) -> ServiceConfig:
    """Config from ``config_file`` (or $CONFIG_FILE) if set, else from the environment"""
    config_file = config_file or os.getenv("CONFIG_FILE")
    if config_file:
        return ConfigLoader(Path(config_file)).load()
    return ServiceConfig.from_env()
