"""
Query Helpers

Resolution lookup and boundary snapping for callers of CandleStore.load_candles.
"""

from dataflow.query.resolutions import RESOLUTIONS, resolve_resolution, snap_range

__all__ = [
    "RESOLUTIONS",
    "resolve_resolution",
    "snap_range",
]
