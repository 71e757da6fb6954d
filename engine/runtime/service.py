"""
Candle Store Service

Wires Redis, the store registry and the NATS tick sink together for the
configured symbols.
"""

import logging
from typing import Optional

from dataflow.adapters.nats_client import NatsClient
from dataflow.adapters.redis_client import RedisClient
from dataflow.persistence.registry import StoreRegistry
from dataflow.persistence.sink import TickSink
from ..config.loader import ServiceConfig

logger = logging.getLogger(__name__)


class CandleStoreService:
    """
    Owns the long-lived clients of a candle store process.

    The registry is built once here and handed to the sink; query code in the
    same process should take it from ``service.registry``.

    Example usage:
        service = CandleStoreService(config, RedisClient(redis_config), NatsClient(nats_config))
        await service.start()
        ...
        await service.stop()
    """

    def __init__(self, config: ServiceConfig, redis_client: RedisClient, nats_client: NatsClient):
        self.config = config
        self.redis = redis_client
        self.nats = nats_client

        self.registry = StoreRegistry.from_symbols(
            redis_client,
            config.symbols,
            on_decode_error=config.storage.on_decode_error,
            aggregation=config.storage.aggregation,
        )
        self.sink: Optional[TickSink] = None

    async def start(self) -> None:
        """Connect backends and start consuming ticks"""
        logger.info(f"Starting candle store service for {self.registry.symbols()}...")

        await self.redis.connect()
        await self.nats.connect()

        self.sink = TickSink(
            self.nats,
            self.registry,
            subject=self.config.sink.subject,
            queue=self.config.sink.queue,
        )
        await self.sink.start()

        logger.info("Candle store service started")

    async def stop(self) -> None:
        """Stop the sink and close connections"""
        logger.info("Stopping candle store service...")

        if self.sink is not None:
            await self.sink.stop()
            self.sink = None

        await self.nats.close()
        await self.redis.close()

        logger.info("Candle store service stopped")

    def get_metrics(self) -> dict:
        """Sink counters plus registry size"""
        metrics = {"symbols": len(self.registry)}
        if self.sink is not None:
            metrics.update(self.sink.get_metrics())
        return metrics
