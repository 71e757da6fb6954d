"""
Persistence

Day-sharded tick storage on a list/scalar key-value backend:
- codec: fixed-width base64 records for ticks and candles
- keyspace: symbol/day key derivation
- store: per-symbol tick writes and candle queries
- registry: symbol -> store mapping
- sink: NATS tick intake
"""

from dataflow.persistence.codec import (
    CANDLE_CODEC,
    TICK_CODEC,
    Base64CandleCoder,
    Base64TickCoder,
    Coder,
)
from dataflow.persistence.registry import StoreRegistry
from dataflow.persistence.store import CandleStore

__all__ = [
    "CANDLE_CODEC",
    "TICK_CODEC",
    "Base64CandleCoder",
    "Base64TickCoder",
    "Coder",
    "CandleStore",
    "StoreRegistry",
]
