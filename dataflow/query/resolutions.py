"""
Chart Resolutions

Resolution names accepted by charting front ends and the boundary snapping a
query layer applies before calling CandleStore.load_candles.
"""

MINUTE_MS = 60_000

# Resolution name -> window width in ms
RESOLUTIONS = {
    "1": MINUTE_MS,
    "3": 3 * MINUTE_MS,
    "5": 5 * MINUTE_MS,
    "15": 15 * MINUTE_MS,
    "30": 30 * MINUTE_MS,
    "60": 60 * MINUTE_MS,
    "120": 120 * MINUTE_MS,
    "180": 180 * MINUTE_MS,
    "240": 240 * MINUTE_MS,
    "1D": 1440 * MINUTE_MS,
}


def resolve_resolution(name: str) -> int:
    """
    Window width in ms for a resolution name.

    Raises:
        ValueError: If the name is not a supported resolution
    """
    if name not in RESOLUTIONS:
        raise ValueError(
            f"Invalid resolution '{name}'. Must be one of: {list(RESOLUTIONS.keys())}"
        )
    return RESOLUTIONS[name]


def snap_range(resolution: int, start: int, end: int) -> tuple[int, int]:
    """
    Widen [start, end) to whole windows of ``resolution`` ms.

    ``start`` is floored and ``end`` is ceiled to a multiple of the
    resolution; a range that collapses to nothing is extended by one window.
    """
    if resolution <= 0:
        raise ValueError(f"resolution must be positive, got {resolution}")

    start = (start // resolution) * resolution
    end = -(-end // resolution) * resolution
    if start == end:
        end += resolution
    return start, end
