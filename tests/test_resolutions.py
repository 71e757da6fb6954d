import pytest

from dataflow.query.resolutions import RESOLUTIONS, resolve_resolution, snap_range


def test_resolution_table():
    assert resolve_resolution("1") == 60_000
    assert resolve_resolution("60") == 3_600_000
    assert resolve_resolution("1D") == 86_400_000
    assert len(RESOLUTIONS) == 10


def test_unknown_resolution():
    with pytest.raises(ValueError, match="Invalid resolution"):
        resolve_resolution("7")


def test_snap_range_widens_to_whole_windows():
    assert snap_range(1000, 1500, 3200) == (1000, 4000)
    assert snap_range(1000, 1000, 3000) == (1000, 3000)


def test_snap_range_never_empty():
    assert snap_range(1000, 2000, 2000) == (2000, 3000)


def test_snap_range_rejects_bad_resolution():
    with pytest.raises(ValueError):
        snap_range(0, 0, 1000)
