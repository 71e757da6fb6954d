import base64
import math
import struct

import pytest

from dataflow.errors import MalformedRecord
from dataflow.persistence.codec import (
    CANDLE_CODEC,
    CANDLE_RECORD_SIZE,
    TICK_CODEC,
    TICK_RECORD_SIZE,
)
from schemas.market_data import Candle, PriceStatus, Tick


def _f32(x: float) -> float:
    return struct.unpack("<f", struct.pack("<f", x))[0]


def test_record_sizes():
    assert TICK_RECORD_SIZE == 15
    assert CANDLE_RECORD_SIZE == 36


def test_tick_layout_is_little_endian():
    tick = Tick(price=1.5, confidence=0.25, timestamp=0x0102030405, status=PriceStatus.TRADING)
    raw = base64.b64decode(TICK_CODEC.encode(tick))

    assert len(raw) == 15
    assert struct.unpack("<f", raw[0:4])[0] == 1.5
    assert struct.unpack("<f", raw[4:8])[0] == 0.25
    assert int.from_bytes(raw[8:14], "little") == 0x0102030405
    assert raw[14] == 1


def test_tick_round_trip_truncates_to_float32():
    tick = Tick(price=35.123456789, confidence=0.0123456789, timestamp=1625097600123, status=2)
    decoded = TICK_CODEC.decode(TICK_CODEC.encode(tick))

    assert decoded.price == _f32(35.123456789)
    assert decoded.price == pytest.approx(tick.price, rel=1e-6)
    assert decoded.confidence == _f32(0.0123456789)
    assert decoded.timestamp == tick.timestamp
    assert decoded.status == 2


def test_tick_text_round_trip():
    text = TICK_CODEC.encode(Tick(price=100.0, confidence=1.0, timestamp=123, status=1))
    assert TICK_CODEC.encode(TICK_CODEC.decode(text)) == text


def test_tick_decode_accepts_bytes():
    text = TICK_CODEC.encode(Tick(price=2.0, confidence=0.0, timestamp=5, status=0))
    assert TICK_CODEC.decode(text.encode("ascii")).price == 2.0


def test_max_48_bit_timestamp():
    ts = (1 << 48) - 1
    tick = Tick(price=1.0, confidence=0.0, timestamp=ts)
    assert TICK_CODEC.decode(TICK_CODEC.encode(tick)).timestamp == ts


@pytest.mark.parametrize("ts", [1 << 48, -1])
def test_timestamp_out_of_range_rejected(ts):
    with pytest.raises(ValueError):
        TICK_CODEC.encode(Tick(price=1.0, confidence=0.0, timestamp=ts))


def test_status_out_of_range_rejected():
    with pytest.raises(ValueError):
        TICK_CODEC.encode(Tick(price=1.0, confidence=0.0, timestamp=1, status=256))


def test_candle_round_trip_and_reserved_bytes():
    candle = Candle(open=10.0, close=12.5, high=13.0, low=9.75, start=1000, end=61000)
    text = CANDLE_CODEC.encode(candle)
    raw = base64.b64decode(text)

    assert len(raw) == 36
    assert raw[28:] == b"\x00" * 8
    assert int.from_bytes(raw[16:22], "little") == 1000
    assert int.from_bytes(raw[22:28], "little") == 61000
    assert CANDLE_CODEC.decode(text) == candle
    assert CANDLE_CODEC.encode(CANDLE_CODEC.decode(text)) == text


def test_candle_decode_ignores_reserved_bytes():
    candle = Candle(open=1.0, close=2.0, high=3.0, low=0.5, start=0, end=10)
    raw = bytearray(base64.b64decode(CANDLE_CODEC.encode(candle)))
    raw[28:] = b"\xff" * 8

    assert CANDLE_CODEC.decode(base64.b64encode(bytes(raw)).decode()) == candle


def test_decode_wrong_length_raises_malformed_record():
    candle_text = CANDLE_CODEC.encode(Candle(open=1.0, close=1.0, high=1.0, low=1.0, start=0, end=1))
    with pytest.raises(MalformedRecord):
        TICK_CODEC.decode(candle_text)

    tick_text = TICK_CODEC.encode(Tick(price=1.0, confidence=0.0, timestamp=1))
    with pytest.raises(MalformedRecord):
        CANDLE_CODEC.decode(tick_text)


def test_decode_invalid_base64_raises_malformed_record():
    with pytest.raises(MalformedRecord) as exc_info:
        TICK_CODEC.decode("not base64!!")
    assert exc_info.value.record == "not base64!!"
    # still a ValueError for callers that only know the builtin
    assert isinstance(exc_info.value, ValueError)


@pytest.mark.parametrize("price,expected", [(1e39, math.inf), (-1e39, -math.inf)])
def test_price_beyond_float32_becomes_infinity(price, expected):
    tick = Tick(price=price, confidence=1e40, timestamp=1)
    decoded = TICK_CODEC.decode(TICK_CODEC.encode(tick))

    assert decoded.price == expected
    assert decoded.confidence == math.inf


def test_candle_prices_beyond_float32_become_infinity():
    candle = Candle(open=1.0, close=-1e300, high=1e300, low=-1e300, start=0, end=1000)
    decoded = CANDLE_CODEC.decode(CANDLE_CODEC.encode(candle))

    assert decoded.open == 1.0
    assert decoded.high == math.inf
    assert decoded.low == decoded.close == -math.inf
