"""
NATS Client Adapter

Async NATS client used by the tick sink to receive ticks from price feed
collectors. Collectors publish one JSON tick per message on
``ticks.raw.{symbol}``.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

import nats
from nats.aio.client import Client as NatsConnection
from nats.aio.msg import Msg
from nats.aio.subscription import Subscription

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Msg], Awaitable[None]]


@dataclass
class NatsConfig:
    """NATS connection configuration"""
    servers: list[str] = field(default_factory=lambda: ["nats://localhost:4222"])
    name: str = "candle-store"
    reconnect_time_wait: float = 2.0
    max_reconnect_attempts: int = -1  # reconnect forever
    ping_interval: int = 20
    max_outstanding_pings: int = 3

    @classmethod
    def from_env(cls, prefix: str = "NATS") -> "NatsConfig":
        """Create config from environment variables"""
        servers = os.getenv(f"{prefix}_SERVERS", "nats://localhost:4222")
        return cls(
            servers=[s.strip() for s in servers.split(",") if s.strip()],
            name=os.getenv(f"{prefix}_CLIENT_NAME", "candle-store"),
        )

    def connect_options(self) -> dict[str, Any]:
        """Keyword arguments for nats.connect"""
        return {
            "servers": self.servers,
            "name": self.name,
            "reconnect_time_wait": self.reconnect_time_wait,
            "max_reconnect_attempts": self.max_reconnect_attempts,
            "ping_interval": self.ping_interval,
            "max_outstanding_pings": self.max_outstanding_pings,
        }


class NatsClient:
    """
    Subscribe-side NATS wrapper.

    Tracks subscriptions by subject so they can be dropped individually, and
    mirrors the connection state reported by the NATS callbacks.
    """

    def __init__(self, config: Optional[NatsConfig] = None):
        self.config = config or NatsConfig()
        self._nc: Optional[NatsConnection] = None
        self._subscriptions: dict[str, Subscription] = {}
        self._connected = False

    @property
    def is_connected(self) -> bool:
        """Check if client is connected"""
        return self._connected and self._nc is not None and self._nc.is_connected

    async def _on_error(self, e: Exception) -> None:
        logger.error(f"NATS error: {e}")

    async def _on_disconnected(self) -> None:
        logger.warning("NATS disconnected")
        self._connected = False

    async def _on_reconnected(self) -> None:
        logger.info("NATS reconnected")
        self._connected = True

    async def _on_closed(self) -> None:
        logger.warning("NATS connection closed")
        self._connected = False

    async def connect(self) -> None:
        """Establish connection to NATS server"""
        if self._connected:
            return

        try:
            self._nc = await nats.connect(
                error_cb=self._on_error,
                disconnected_cb=self._on_disconnected,
                reconnected_cb=self._on_reconnected,
                closed_cb=self._on_closed,
                **self.config.connect_options(),
            )
        except Exception as e:
            logger.error(f"Failed to connect to NATS: {e}")
            raise

        self._connected = True
        logger.info(f"Connected to NATS: {self.config.servers}")

    async def close(self) -> None:
        """Drain pending messages and close the connection"""
        if self._nc is None:
            return
        await self._nc.drain()
        await self._nc.close()
        self._subscriptions.clear()
        self._connected = False
        logger.info("NATS connection closed")

    async def subscribe(
        self,
        subject: str,
        callback: MessageHandler,
        queue: Optional[str] = None,
    ) -> None:
        """
        Subscribe to a NATS subject.

        Args:
            subject: NATS subject pattern (supports wildcards: *, >)
            callback: Async callback for received messages
            queue: Optional queue group so several sinks share the stream
        """
        if not self.is_connected:
            raise RuntimeError("NATS client not connected")

        self._subscriptions[subject] = await self._nc.subscribe(
            subject, queue=queue or "", cb=callback
        )
        logger.info(f"Subscribed to {subject}" + (f" (queue: {queue})" if queue else ""))

    async def unsubscribe(self, subject: str) -> None:
        """Unsubscribe from a subject"""
        sub = self._subscriptions.pop(subject, None)
        if sub is not None:
            await sub.unsubscribe()
            logger.info(f"Unsubscribed from {subject}")


class Topics:
    """NATS topic name builders"""

    @staticmethod
    def _sanitize(name: str) -> str:
        """
        Sanitize a symbol for use as a NATS topic segment.

        Only alphanumerics, hyphens and underscores are kept; anything else
        (e.g. the slash in "SOL/USD") becomes an underscore.
        """
        return "".join(c if c.isalnum() or c in "-_" else "_" for c in name)

    @staticmethod
    def ticks_raw(symbol: str) -> str:
        """Raw tick topic for a symbol"""
        return f"ticks.raw.{Topics._sanitize(symbol)}"

    @staticmethod
    def all_ticks() -> str:
        """Subscribe to all tick symbols"""
        return "ticks.raw.*"
