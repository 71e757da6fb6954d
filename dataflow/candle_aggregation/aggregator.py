"""
Candle Aggregator

Folds decoded ticks into fixed-resolution OHLC candles.

Windows are half-open [start, end) and take their boundaries from the query,
not from the ticks. A window without ticks produces no candle; nothing is
forward-filled.
"""

import logging
from typing import Iterable, Optional

from schemas.market_data import Candle, Tick

logger = logging.getLogger(__name__)


class CandleBuilder:
    """Builds a candle for one window from incoming ticks"""

    def __init__(self, start: int, end: int):
        self.start = start
        self.end = end
        self.open: Optional[float] = None
        self.high: Optional[float] = None
        self.low: Optional[float] = None
        self.close: Optional[float] = None

    def add_tick(self, tick: Tick) -> None:
        """Add a tick to this candle"""
        price = tick.price

        if self.open is None:
            self.open = price
            self.high = price
            self.low = price

        self.high = max(self.high, price)
        self.low = min(self.low, price)
        self.close = price

    def is_empty(self) -> bool:
        """Check if candle has any data"""
        return self.open is None

    def build(self) -> Candle:
        """Build the final Candle object"""
        if self.is_empty():
            raise ValueError("Cannot build empty candle")

        return Candle(
            open=self.open,
            close=self.close,
            high=self.high,
            low=self.low,
            start=self.start,
            end=self.end,
        )


def _check_resolution(resolution: int) -> None:
    if resolution <= 0:
        raise ValueError(f"resolution must be positive, got {resolution}")


def batch(ticks: Iterable[Tick], start: int, end: int) -> Optional[Candle]:
    """
    Candle for the ticks in [start, end), or None if there are none.

    Ticks are folded in the order given: the first one opens the candle and the
    last one closes it. Pass time-ordered ticks for OHLC semantics.
    """
    builder = CandleBuilder(start, end)
    for tick in ticks:
        if start <= tick.timestamp < end:
            builder.add_tick(tick)

    if builder.is_empty():
        return None
    return builder.build()


def batch_series(ticks: list[Tick], resolution: int, start: int, end: int) -> list[Candle]:
    """
    Candles for every complete window of ``resolution`` ms from start to end.

    Re-filters the full tick list for each window, O(windows x ticks). Kept as
    the reference behaviour for :func:`batch_series_sweep`. A trailing window
    that would extend past ``end`` is not produced.
    """
    _check_resolution(resolution)

    candles = []
    cursor = start
    while cursor + resolution <= end:
        candle = batch(ticks, cursor, cursor + resolution)
        if candle is not None:
            candles.append(candle)
        cursor += resolution
    return candles


def batch_series_sweep(ticks: Iterable[Tick], resolution: int, start: int, end: int) -> list[Candle]:
    """
    Same windows as :func:`batch_series`, built in one pass over sorted ticks.

    Ticks are stable-sorted by timestamp once, so open and close follow time
    order; ticks sharing a timestamp keep their input order. For time-ordered
    input the result equals :func:`batch_series`.
    """
    _check_resolution(resolution)

    windows = max(0, (end - start) // resolution)
    last_end = start + windows * resolution
    ordered = sorted(
        (t for t in ticks if start <= t.timestamp < last_end),
        key=lambda t: t.timestamp,
    )

    candles = []
    builder: Optional[CandleBuilder] = None
    for tick in ordered:
        window_start = start + (tick.timestamp - start) // resolution * resolution
        if builder is None or builder.start != window_start:
            if builder is not None:
                candles.append(builder.build())
            builder = CandleBuilder(window_start, window_start + resolution)
        builder.add_tick(tick)

    if builder is not None:
        candles.append(builder.build())

    logger.debug(f"Aggregated {len(ordered)} ticks into {len(candles)}/{windows} candles")
    return candles


AGGREGATORS = {
    "scan": batch_series,
    "sweep": batch_series_sweep,
}
