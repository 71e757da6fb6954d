"""
Redis Client Adapter

Provides the list/scalar key-value primitives the candle store needs, backed
by redis.asyncio. Connection failures surface as BackendUnavailable and are
never retried here.
"""

import functools
import logging
import os
from dataclasses import dataclass
from typing import Optional, Protocol
from urllib.parse import urlparse

from redis import exceptions as redis_exceptions
from redis.asyncio import Redis

from dataflow.errors import BackendUnavailable

logger = logging.getLogger(__name__)


class Backend(Protocol):
    """Key-value primitives required by the candle store"""

    async def append(self, key: str, value: str) -> None: ...

    async def read_all(self, key: str) -> list[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def get(self, key: str) -> Optional[str]: ...


@dataclass
class RedisConfig:
    """
    Redis connection configuration.

    A database number in the URL path (``redis://host:6379/2``) takes
    precedence over ``db``.
    """
    url: str = "redis://localhost:6379"
    db: int = 0
    client_name: str = "candle-store"
    socket_timeout: Optional[float] = 5.0
    socket_connect_timeout: Optional[float] = 5.0

    @classmethod
    def from_env(cls, prefix: str = "REDIS") -> "RedisConfig":
        """
        Create config from environment variables.

        Environment Variables:
            {prefix}_URL: Redis URL, falls back to REDISCLOUD_URL
            {prefix}_DB: Database number, used when the URL names none (default: 0)
            {prefix}_CLIENT_NAME: Connection name (default: "candle-store")
        """
        url = (
            os.getenv(f"{prefix}_URL")
            or os.getenv("REDISCLOUD_URL")
            or "redis://localhost:6379"
        )
        return cls(
            url=url,
            db=int(os.getenv(f"{prefix}_DB", "0")),
            client_name=os.getenv(f"{prefix}_CLIENT_NAME", "candle-store"),
        )


def _unavailable(method):
    """Translate redis connection failures into BackendUnavailable"""

    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        if self._redis is None:
            raise BackendUnavailable("Redis client not connected")
        try:
            return await method(self, *args, **kwargs)
        except (redis_exceptions.ConnectionError, redis_exceptions.TimeoutError) as e:
            logger.error(f"Redis {method.__name__} failed: {e}")
            raise BackendUnavailable(f"Redis {method.__name__} failed: {e}") from e

    return wrapper


class RedisClient:
    """
    Async Redis wrapper implementing the candle store backend.

    Primitives:
    - append(key, value)  -> RPUSH
    - read_all(key)       -> LRANGE key 0 -1 (append order)
    - set(key, value)     -> SET
    - get(key)            -> GET
    """

    def __init__(self, config: Optional[RedisConfig] = None, redis: Optional[Redis] = None):
        self.config = config or RedisConfig()
        self._redis: Optional[Redis] = redis

    @property
    def db(self) -> int:
        """Database the client selects, the URL path wins over config.db"""
        url = urlparse(self.config.url)
        path = url.path.strip("/")
        if url.scheme in ("redis", "rediss") and path.isdigit():
            return int(path)
        return self.config.db

    @property
    def is_connected(self) -> bool:
        """Check if client has an open connection pool"""
        return self._redis is not None

    async def connect(self) -> None:
        """Open the connection pool and verify the server answers"""
        if self._redis is not None:
            return

        redis = Redis.from_url(
            self.config.url,
            db=self.db,
            client_name=self.config.client_name,
            socket_timeout=self.config.socket_timeout,
            socket_connect_timeout=self.config.socket_connect_timeout,
            decode_responses=True,
        )
        try:
            await redis.ping()
        except (redis_exceptions.ConnectionError, redis_exceptions.TimeoutError) as e:
            await redis.aclose()
            logger.error(f"Failed to connect to Redis: {e}")
            raise BackendUnavailable(f"Failed to connect to Redis: {e}") from e

        self._redis = redis
        logger.info(f"Connected to Redis (db={self.db})")

    async def close(self) -> None:
        """Close the connection pool"""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            logger.info("Redis connection closed")

    @_unavailable
    async def append(self, key: str, value: str) -> None:
        await self._redis.rpush(key, value)

    @_unavailable
    async def read_all(self, key: str) -> list[str]:
        return list(await self._redis.lrange(key, 0, -1))

    @_unavailable
    async def set(self, key: str, value: str) -> None:
        await self._redis.set(key, value)

    @_unavailable
    async def get(self, key: str) -> Optional[str]:
        return await self._redis.get(key)
