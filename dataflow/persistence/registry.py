"""
Store Registry

Explicit symbol -> CandleStore mapping, built once at startup and passed to
producers (tick sink) and consumers (query layer) instead of being looked up
through module-level state.
"""

import logging
from typing import Dict, Iterable

from dataflow.adapters.redis_client import Backend
from dataflow.persistence.store import AggregationStrategy, CandleStore, DecodeErrorPolicy

logger = logging.getLogger(__name__)


class StoreRegistry:
    """
    Registry of candle stores indexed by symbol.

    Example usage:
        registry = StoreRegistry.from_symbols(redis_client, ["SOL/USD", "BTC/USD"])
        store = registry.get("SOL/USD")
        candles = await store.load_candles(60_000, start, end)
    """

    def __init__(self):
        self._stores: Dict[str, CandleStore] = {}

    @classmethod
    def from_symbols(
        cls,
        backend: Backend,
        symbols: Iterable[str],
        on_decode_error: DecodeErrorPolicy = "fail",
        aggregation: AggregationStrategy = "sweep",
    ) -> "StoreRegistry":
        """Build one store per symbol, all sharing ``backend``"""
        registry = cls()
        for symbol in symbols:
            registry.register(
                symbol,
                CandleStore(
                    backend,
                    symbol,
                    on_decode_error=on_decode_error,
                    aggregation=aggregation,
                ),
            )
        return registry

    def register(self, symbol: str, store: CandleStore) -> None:
        """
        Register the store for a symbol.

        Args:
            symbol: Instrument symbol (e.g., "SOL/USD")
            store: Store serving that symbol
        """
        if symbol in self._stores:
            logger.warning(f"Overwriting existing store for symbol: {symbol}")

        self._stores[symbol] = store
        logger.info(f"Registered store for {symbol}")

    def get(self, symbol: str) -> CandleStore:
        """
        Store for a symbol.

        Raises:
            KeyError: If no store is registered for the symbol
        """
        try:
            return self._stores[symbol]
        except KeyError:
            available = ", ".join(self._stores) or "none"
            raise KeyError(
                f"No store registered for symbol: {symbol}. Available symbols: {available}"
            ) from None

    def symbols(self) -> list[str]:
        """List all registered symbols"""
        return list(self._stores)

    def is_registered(self, symbol: str) -> bool:
        """Check if a symbol has a store"""
        return symbol in self._stores

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._stores

    def __len__(self) -> int:
        return len(self._stores)
