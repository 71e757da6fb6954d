"""
Candle Store

Tick storage and candle queries for one symbol on top of a list/scalar
key-value backend.

Writes append one encoded tick to the tick's day bucket. Reads fan out over
every day bucket a query range touches, decode the ticks and aggregate them
into candles on the fly; nothing derived is ever written back.
"""

import asyncio
import base64
import logging
from typing import Literal, Optional

from dataflow.adapters.redis_client import Backend
from dataflow.candle_aggregation.aggregator import AGGREGATORS
from dataflow.errors import MalformedRecord
from dataflow.persistence import keyspace
from dataflow.persistence.codec import TICK_CODEC
from schemas.market_data import Candle, Tick

logger = logging.getLogger(__name__)

DecodeErrorPolicy = Literal["fail", "skip"]
AggregationStrategy = Literal["sweep", "scan"]


class CandleStore:
    """
    Stores ticks and serves OHLC candles for a single symbol.

    The store holds no mutable state of its own and can be shared by
    concurrent readers and writers, provided the backend appends atomically.

    Args:
        backend: Key-value backend (see :class:`~dataflow.adapters.Backend`)
        symbol: Instrument symbol, used as the key prefix
        on_decode_error: "fail" raises MalformedRecord on a corrupt entry,
            "skip" drops it and logs a warning
        aggregation: "sweep" (sort once, single pass) or "scan" (filter the
            full tick list per window, read order decides open/close)

    Example usage:
        store = CandleStore(redis_client, "SOL/USD")
        await store.store_price(Tick(price=35.2, confidence=0.01, timestamp=ts))
        candles = await store.load_candles(60_000, start, end)
    """

    def __init__(
        self,
        backend: Backend,
        symbol: str,
        on_decode_error: DecodeErrorPolicy = "fail",
        aggregation: AggregationStrategy = "sweep",
    ):
        if on_decode_error not in ("fail", "skip"):
            raise ValueError(f"Unknown decode error policy: {on_decode_error}")
        if aggregation not in AGGREGATORS:
            raise ValueError(
                f"Unknown aggregation strategy: {aggregation}. "
                f"Available: {', '.join(AGGREGATORS)}"
            )

        self.backend = backend
        self.symbol = symbol
        self.on_decode_error = on_decode_error
        self.aggregation = aggregation
        self._aggregate = AGGREGATORS[aggregation]

    def __repr__(self) -> str:
        return (
            f"CandleStore(symbol={self.symbol!r}, "
            f"on_decode_error={self.on_decode_error!r}, aggregation={self.aggregation!r})"
        )

    # Ticks and candles

    async def store_price(self, tick: Tick) -> None:
        """
        Append a tick to its day bucket.

        Not idempotent: storing the same tick twice keeps both entries.
        Backend failures propagate to the caller.
        """
        key = keyspace.day_key(self.symbol, tick.timestamp)
        await self.backend.append(key, TICK_CODEC.encode(tick))

    async def _read_ticks(self, keys: list[str]) -> list[Tick]:
        responses = await asyncio.gather(*(self.backend.read_all(key) for key in keys))

        ticks = []
        skipped = 0
        for key, entries in zip(keys, responses):
            for entry in entries:
                try:
                    ticks.append(TICK_CODEC.decode(entry))
                except MalformedRecord:
                    if self.on_decode_error == "fail":
                        logger.error(f"Corrupt tick record in {key}: {entry!r}")
                        raise
                    skipped += 1

        if skipped:
            logger.warning(f"Skipped {skipped} corrupt tick records for {self.symbol}")
        return ticks

    async def load_candles(self, resolution: int, start: int, end: int) -> list[Candle]:
        """
        Candles of ``resolution`` ms covering [start, end), oldest first.

        Windows without ticks are left out, so the result can be shorter than
        the number of windows in the range. Callers should snap start and end
        to multiples of the resolution. Any failed bucket read fails the call.
        """
        keys = keyspace.ordered_bucket_keys(self.symbol, resolution, start, end)
        ticks = await self._read_ticks(keys)
        candles = self._aggregate(ticks, resolution, start, end)

        logger.debug(
            f"Loaded {len(candles)} candles for {self.symbol} "
            f"from {len(ticks)} ticks in {len(keys)} buckets"
        )
        return candles

    async def load_ticks(self, start: int, end: int) -> list[Tick]:
        """Stored ticks with a timestamp in [start, end), in read order"""
        keys = keyspace.ordered_bucket_keys(self.symbol, keyspace.DAY_MS, start, end)
        ticks = await self._read_ticks(keys)
        return [t for t in ticks if start <= t.timestamp < end]

    # Scalars

    async def store_number(self, key: str, value: float) -> None:
        """Store a named number in the symbol's namespace"""
        await self.backend.set(keyspace.number_key(self.symbol, key), str(value))

    async def load_number(self, key: str) -> Optional[float]:
        """Load a named number, or None if it was never stored"""
        result = await self.backend.get(keyspace.number_key(self.symbol, key))
        if result is None:
            return None
        return float(result)

    # Raw buffers

    async def store_buffer(self, ts: int, data: bytes) -> None:
        """Store a raw snapshot buffer taken at ``ts``"""
        encoded = base64.b64encode(data).decode("ascii")
        await self.backend.set(keyspace.buffer_key(self.symbol, ts), encoded)

    async def load_buffer(self, ts: int) -> Optional[bytes]:
        """Load the raw snapshot buffer taken at ``ts``, if any"""
        result = await self.backend.get(keyspace.buffer_key(self.symbol, ts))
        if result is None:
            return None
        return base64.b64decode(result)
