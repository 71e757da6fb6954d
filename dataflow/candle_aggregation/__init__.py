"""
Candle Aggregation

Folds raw ticks into fixed-resolution OHLC candles.
"""

from dataflow.candle_aggregation.aggregator import (
    AGGREGATORS,
    CandleBuilder,
    batch,
    batch_series,
    batch_series_sweep,
)

__all__ = [
    "AGGREGATORS",
    "CandleBuilder",
    "batch",
    "batch_series",
    "batch_series_sweep",
]
