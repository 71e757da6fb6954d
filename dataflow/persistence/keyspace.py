"""
Key Space

Pure functions deriving backend keys from (symbol, timestamp, resolution).
Ticks are sharded into one append-only list per symbol and UTC calendar day.

Day keys keep the layout already written by deployed collectors:
``{symbol}-{year}-{month}-{day}`` with a zero-based month and no padding,
e.g. 2021-07-01 for SOL/USD is ``SOL/USD-2021-6-1``.
"""

DAY_MS = 86_400_000


def civil_from_days(days: int) -> tuple[int, int, int]:
    """
    Proleptic Gregorian (year, month, day) for a count of days since 1970-01-01.

    Integer-only, so it covers the whole uint48 millisecond range where
    ``datetime`` stops at year 9999.
    """
    days += 719_468
    era = days // 146_097
    doe = days - era * 146_097
    yoe = (doe - doe // 1460 + doe // 36_524 - doe // 146_096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (month <= 2)
    return year, month, day


def day_key(symbol: str, ts: int) -> str:
    """Key of the day bucket holding a tick at ``ts`` (ms since epoch)"""
    year, month, day = civil_from_days(ts // DAY_MS)
    return f"{symbol}-{year}-{month - 1}-{day}"


def ordered_bucket_keys(symbol: str, resolution: int, start: int, end: int) -> list[str]:
    """
    Day keys that can hold ticks for candles in [start, end), oldest first.

    Steps from ``start`` by ``resolution`` while below ``end`` and always adds
    the day of ``end`` itself, so the last day is covered even when the range
    is not a multiple of the resolution. Over-inclusion is expected.

    Raises:
        ValueError: If resolution is not positive
    """
    if resolution <= 0:
        raise ValueError(f"resolution must be positive, got {resolution}")

    keys: dict[str, None] = {}
    cursor = start
    while cursor < end:
        keys.setdefault(day_key(symbol, cursor))
        cursor += resolution
    keys.setdefault(day_key(symbol, end))
    return list(keys)


def bucket_keys_for_range(symbol: str, resolution: int, start: int, end: int) -> set[str]:
    """Deduplicated day keys touched by [start, end), see :func:`ordered_bucket_keys`"""
    return set(ordered_bucket_keys(symbol, resolution, start, end))


def buffer_key(symbol: str, ts: int) -> str:
    """Key for a raw snapshot buffer taken at ``ts``"""
    return f"{symbol}-{ts}"


def number_key(symbol: str, key: str) -> str:
    """Key for a named scalar in the symbol's namespace"""
    return f"{symbol}-NUM-{key}"


def key_match_for_range(symbol: str, resolution: int, start: int) -> str:
    """
    Glob pattern matching buffer keys between ``start`` and ``start + resolution``.

    Built from the longest common prefix of the two boundary keys, for use with
    a single pattern scan instead of enumerating keys. Not used by the read path.
    """
    first = buffer_key(symbol, start)
    second = buffer_key(symbol, start + resolution)
    for i in range(min(len(first), len(second))):
        if first[i] != second[i]:
            return first[:i] + "*"
    return first
