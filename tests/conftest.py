import sys
import pathlib
from collections import defaultdict

import pytest

root_dir = pathlib.Path(__file__).resolve().parents[1]
if str(root_dir) not in sys.path:
    sys.path.append(str(root_dir))

from dataflow.errors import BackendUnavailable  # noqa: E402
from dataflow.persistence.store import CandleStore  # noqa: E402
from schemas.market_data import Tick  # noqa: E402


class InMemoryBackend:
    """List/scalar backend keeping append order, with per-key failure injection."""

    def __init__(self):
        self.lists: dict[str, list[str]] = defaultdict(list)
        self.scalars: dict[str, str] = {}
        self.fail_keys: set[str] = set()
        self.reads: list[str] = []

    def _check(self, key: str) -> None:
        if key in self.fail_keys:
            raise BackendUnavailable(f"backend down for {key}")

    async def append(self, key: str, value: str) -> None:
        self._check(key)
        self.lists[key].append(value)

    async def read_all(self, key: str) -> list[str]:
        self._check(key)
        self.reads.append(key)
        return list(self.lists.get(key, []))

    async def set(self, key: str, value: str) -> None:
        self._check(key)
        self.scalars[key] = value

    async def get(self, key: str):
        self._check(key)
        return self.scalars.get(key)


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def store(backend):
    return CandleStore(backend, "X")


@pytest.fixture
def make_tick():
    def _make(price: float, ts: int, confidence: float = 0.5, status: int = 1) -> Tick:
        return Tick(price=price, confidence=confidence, timestamp=ts, status=status)

    return _make
