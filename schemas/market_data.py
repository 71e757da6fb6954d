"""
Market Data Types

Core market data types used throughout the candle store.
Ticks travel as JSON between producers and the tick sink, and as fixed-width
base64 records inside the key-value backend.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Union
import json


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class PriceStatus(IntEnum):
    """Status codes reported by the upstream price oracle"""
    UNKNOWN = 0
    TRADING = 1
    HALTED = 2
    AUCTION = 3


def to_millis(value: Union[int, float, str, datetime]) -> int:
    """Normalize a timestamp (ms since epoch, ISO 8601 string or datetime) to ms"""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return (value - EPOCH) // timedelta(milliseconds=1)
    return int(value)


@dataclass(frozen=True)
class Tick:
    """One observed price update"""
    price: float
    confidence: float
    timestamp: int  # ms since epoch, fits 48 bits
    status: int = PriceStatus.UNKNOWN

    @property
    def time(self) -> datetime:
        """Timestamp as an aware UTC datetime"""
        return EPOCH + timedelta(milliseconds=self.timestamp)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "price": self.price,
            "confidence": self.confidence,
            "timestamp": self.timestamp,
            "status": int(self.status),
        }

    def to_json(self) -> str:
        """Serialize to JSON string"""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict) -> "Tick":
        """Create Tick from dictionary"""
        return cls(
            price=float(data["price"]),
            confidence=float(data.get("confidence", 0.0)),
            timestamp=to_millis(data["timestamp"]),
            status=int(data.get("status", PriceStatus.UNKNOWN)),
        )

    @classmethod
    def from_json(cls, json_str: str) -> "Tick":
        """Deserialize from JSON string"""
        return cls.from_dict(json.loads(json_str))


@dataclass(frozen=True)
class Candle:
    """OHLC summary of the ticks in the half-open window [start, end)"""
    open: float
    close: float
    high: float
    low: float
    start: int
    end: int

    @property
    def resolution(self) -> int:
        """Window width in ms"""
        return self.end - self.start

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "open": self.open,
            "close": self.close,
            "high": self.high,
            "low": self.low,
            "start": self.start,
            "end": self.end,
        }

    def to_json(self) -> str:
        """Serialize to JSON string"""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict) -> "Candle":
        """Create Candle from dictionary"""
        return cls(
            open=float(data["open"]),
            close=float(data["close"]),
            high=float(data["high"]),
            low=float(data["low"]),
            start=to_millis(data["start"]),
            end=to_millis(data["end"]),
        )

    @classmethod
    def from_json(cls, json_str: str) -> "Candle":
        """Deserialize from JSON string"""
        return cls.from_dict(json.loads(json_str))
