"""
Record Codecs

Fixed-width little-endian binary records for ticks and candles, carried as
base64 text so they fit the backend's string list/scalar primitives.

Prices outside the float32 range are written as signed infinity.

Tick (15 bytes):
    [0:4)   price        float32
    [4:8)   confidence   float32
    [8:14)  timestamp    uint48 (ms)
    [14:15) status       uint8

Candle (36 bytes):
    [0:4)   open   float32
    [4:8)   close  float32
    [8:12)  high   float32
    [12:16) low    float32
    [16:22) start  uint48 (ms)
    [22:28) end    uint48 (ms)
    [28:36) reserved, zero on encode, ignored on decode
"""

import base64
import binascii
import math
import struct
from typing import Generic, Protocol, TypeVar, Union

from dataflow.errors import MalformedRecord
from schemas.market_data import Candle, Tick

T = TypeVar("T")

# uint48 fields are packed as a uint32 low word followed by a uint16 high word
TICK_STRUCT = struct.Struct("<ffIHB")
CANDLE_STRUCT = struct.Struct("<ffffIHIH8x")
_FLOAT32 = struct.Struct("<f")

TICK_RECORD_SIZE = TICK_STRUCT.size
CANDLE_RECORD_SIZE = CANDLE_STRUCT.size

MAX_TIMESTAMP = (1 << 48) - 1


class Coder(Protocol[T]):
    """Text codec for one record type"""

    def encode(self, record: T) -> str: ...

    def decode(self, text: Union[str, bytes]) -> T: ...


def _split_u48(value: int, field: str) -> tuple[int, int]:
    if not 0 <= value <= MAX_TIMESTAMP:
        raise ValueError(f"{field}={value} does not fit in 48 bits")
    return value & 0xFFFFFFFF, value >> 32


def _join_u48(low: int, high: int) -> int:
    return (high << 32) | low


def _f32(value: float) -> float:
    # float32 overflow is stored as a signed infinity
    try:
        _FLOAT32.pack(value)
    except OverflowError:
        return math.copysign(math.inf, value)
    return value


class _Base64Coder(Generic[T]):
    record_size: int
    name: str

    def _to_bytes(self, text: Union[str, bytes]) -> bytes:
        try:
            raw = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as e:
            raise MalformedRecord(f"{self.name} record is not valid base64: {e}", text) from e

        if len(raw) != self.record_size:
            raise MalformedRecord(
                f"{self.name} record must be {self.record_size} bytes, got {len(raw)}",
                text,
            )
        return raw

    @staticmethod
    def _to_text(raw: bytes) -> str:
        return base64.b64encode(raw).decode("ascii")


class Base64TickCoder(_Base64Coder[Tick]):
    """Encodes ticks as 15-byte base64 records"""

    record_size = TICK_RECORD_SIZE
    name = "Tick"

    def encode(self, tick: Tick) -> str:
        if not 0 <= tick.status <= 0xFF:
            raise ValueError(f"status={tick.status} does not fit in 8 bits")
        ts_low, ts_high = _split_u48(tick.timestamp, "timestamp")
        raw = TICK_STRUCT.pack(
            _f32(tick.price), _f32(tick.confidence), ts_low, ts_high, int(tick.status)
        )
        return self._to_text(raw)

    def decode(self, text: Union[str, bytes]) -> Tick:
        price, confidence, ts_low, ts_high, status = TICK_STRUCT.unpack(self._to_bytes(text))
        return Tick(
            price=price,
            confidence=confidence,
            timestamp=_join_u48(ts_low, ts_high),
            status=status,
        )


class Base64CandleCoder(_Base64Coder[Candle]):
    """Encodes candles as 36-byte base64 records"""

    record_size = CANDLE_RECORD_SIZE
    name = "Candle"

    def encode(self, candle: Candle) -> str:
        start_low, start_high = _split_u48(candle.start, "start")
        end_low, end_high = _split_u48(candle.end, "end")
        raw = CANDLE_STRUCT.pack(
            _f32(candle.open),
            _f32(candle.close),
            _f32(candle.high),
            _f32(candle.low),
            start_low,
            start_high,
            end_low,
            end_high,
        )
        return self._to_text(raw)

    def decode(self, text: Union[str, bytes]) -> Candle:
        (
            open_,
            close,
            high,
            low,
            start_low,
            start_high,
            end_low,
            end_high,
        ) = CANDLE_STRUCT.unpack(self._to_bytes(text))
        return Candle(
            open=open_,
            close=close,
            high=high,
            low=low,
            start=_join_u48(start_low, start_high),
            end=_join_u48(end_low, end_high),
        )


TICK_CODEC: Coder[Tick] = Base64TickCoder()
CANDLE_CODEC: Coder[Candle] = Base64CandleCoder()
