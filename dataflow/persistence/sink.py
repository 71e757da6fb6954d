"""
Tick Sink

Consumes ticks published by price feed collectors on NATS and appends them
to the owning symbol's candle store.

Subscribes to:
- ticks.raw.*  -> CandleStore.store_price

Message payload (JSON):
    {"symbol": "SOL/USD", "price": 35.21, "confidence": 0.02,
     "timestamp": 1625097600000, "status": 1}

There is no buffering: a tick whose append fails is logged and counted,
redelivery is up to the publisher.
"""

import json
import logging
from typing import Optional

from dataflow.adapters.nats_client import NatsClient, Topics
from dataflow.persistence.registry import StoreRegistry
from schemas.market_data import Tick

logger = logging.getLogger(__name__)


class TickSink:
    """
    Routes ticks from NATS to the store registered for their symbol.

    Args:
        nats_client: Connected NATS client
        registry: Stores for every accepted symbol
        subject: Subject pattern to consume
        queue: Optional queue group so several sinks split the stream
    """

    def __init__(
        self,
        nats_client: NatsClient,
        registry: StoreRegistry,
        subject: Optional[str] = None,
        queue: Optional[str] = None,
    ):
        self.nats = nats_client
        self.registry = registry
        self.subject = subject or Topics.all_ticks()
        self.queue = queue

        # Metrics
        self._ticks_written = 0
        self._write_failures = 0
        self._rejected = 0

    async def handle_message(self, msg) -> None:
        """Handle one incoming tick message"""
        try:
            data = json.loads(msg.data.decode())
            symbol = str(data["symbol"])
            tick = Tick.from_dict(data)
        except (ValueError, KeyError, TypeError) as e:
            self._rejected += 1
            logger.error(f"Failed to parse tick on {msg.subject}: {e}")
            return

        if symbol not in self.registry:
            self._rejected += 1
            logger.warning(f"Dropping tick for unregistered symbol: {symbol}")
            return

        try:
            await self.registry.get(symbol).store_price(tick)
        except ValueError as e:
            # timestamp or status outside the record layout
            self._rejected += 1
            logger.error(f"Rejected tick for {symbol} on {msg.subject}: {e}")
            return
        except Exception:
            self._write_failures += 1
            logger.exception(f"Failed to store tick for {symbol} @ {tick.timestamp}")
            return

        self._ticks_written += 1
        logger.debug(f"Stored tick: {symbol} @ {tick.price} ({tick.timestamp})")

    async def start(self) -> None:
        """Start consuming ticks"""
        logger.info(f"Starting tick sink for {len(self.registry)} symbols: {self.registry.symbols()}")
        await self.nats.subscribe(self.subject, self.handle_message, queue=self.queue)
        logger.info("Tick sink started")

    async def stop(self) -> None:
        """Stop consuming ticks"""
        await self.nats.unsubscribe(self.subject)
        logger.info(
            f"Tick sink stopped. Written: {self._ticks_written}, "
            f"failed: {self._write_failures}, rejected: {self._rejected}"
        )

    def get_metrics(self) -> dict:
        """Counters since start"""
        return {
            "ticks_written": self._ticks_written,
            "write_failures": self._write_failures,
            "rejected": self._rejected,
        }
