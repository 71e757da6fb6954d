"""
Schemas

Typed records shared by the storage engine, the tick sink and callers.
"""

from schemas.market_data import Tick, Candle, PriceStatus

__all__ = [
    "Tick",
    "Candle",
    "PriceStatus",
]
