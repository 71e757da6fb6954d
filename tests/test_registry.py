import pytest

from dataflow.persistence.registry import StoreRegistry
from dataflow.persistence.store import CandleStore


def test_from_symbols_builds_one_store_per_symbol(backend):
    registry = StoreRegistry.from_symbols(
        backend, ["SOL/USD", "BTC/USD"], on_decode_error="skip", aggregation="scan"
    )

    assert registry.symbols() == ["SOL/USD", "BTC/USD"]
    assert len(registry) == 2
    store = registry.get("SOL/USD")
    assert store.symbol == "SOL/USD"
    assert store.backend is backend
    assert store.on_decode_error == "skip"
    assert store.aggregation == "scan"


def test_get_unknown_symbol_lists_available(backend):
    registry = StoreRegistry.from_symbols(backend, ["SOL/USD"])

    with pytest.raises(KeyError) as exc_info:
        registry.get("ETH/USD")
    assert "SOL/USD" in str(exc_info.value)


def test_membership(backend):
    registry = StoreRegistry()
    assert not registry.is_registered("SOL/USD")
    assert "SOL/USD" not in registry

    registry.register("SOL/USD", CandleStore(backend, "SOL/USD"))

    assert registry.is_registered("SOL/USD")
    assert "SOL/USD" in registry


def test_register_overwrites_with_warning(backend, caplog):
    registry = StoreRegistry()
    first = CandleStore(backend, "SOL/USD")
    second = CandleStore(backend, "SOL/USD", on_decode_error="skip")
    registry.register("SOL/USD", first)

    with caplog.at_level("WARNING"):
        registry.register("SOL/USD", second)

    assert registry.get("SOL/USD") is second
    assert "Overwriting existing store" in caplog.text
