"""
Runtime Module

Process wiring for the candle store service.
"""

from .service import CandleStoreService

__all__ = [
    "CandleStoreService",
]
