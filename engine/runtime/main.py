"""
Candle Store - Main Entry Point

Starts the tick sink for the configured symbols and keeps running until
interrupted.
"""

import asyncio
import logging
import os

from dataflow.adapters.nats_client import NatsClient, NatsConfig
from dataflow.adapters.redis_client import RedisClient, RedisConfig
from engine.config.loader import load_config
from engine.runtime.service import CandleStoreService

logger = logging.getLogger(__name__)


async def run() -> None:
    """
    Run the candle store service.

    Environment Variables:
        CONFIG_FILE: YAML config path (default: configuration from env)
        REDIS_URL / REDISCLOUD_URL: Redis URL (default: "redis://localhost:6379")
        REDIS_DB: Redis database index (default: 0)
        NATS_SERVERS: NATS server URLs (default: "nats://localhost:4222")
        METRICS_INTERVAL: Seconds between metrics logs (default: 60)
    """
    config = load_config()

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    logger.info("=" * 60)
    logger.info("Candle Store Starting")
    logger.info("=" * 60)
    logger.info(f"Symbols: {config.symbols}")
    logger.info(f"Storage: {config.storage.model_dump()}")

    service = CandleStoreService(
        config,
        RedisClient(RedisConfig.from_env()),
        NatsClient(NatsConfig.from_env()),
    )
    metrics_interval = float(os.getenv("METRICS_INTERVAL", "60"))

    try:
        await service.start()
        logger.info("Candle store running. Press Ctrl+C to stop.")

        while True:
            await asyncio.sleep(metrics_interval)
            logger.info(f"Metrics: {service.get_metrics()}")

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        raise
    finally:
        await service.stop()


def main() -> None:
    """Console script entry point"""
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    main()
