import pytest

from engine.config.loader import ConfigLoader, ServiceConfig, load_config


def _write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return path


def test_load_full_config(tmp_path):
    path = _write(
        tmp_path,
        """
symbols:
  - SOL/USD
  - BTC/USD
storage:
  on_decode_error: skip
  aggregation: scan
sink:
  subject: ticks.raw.SOL_USD
  queue: candle-store
log_level: debug
""",
    )

    config = ConfigLoader(path).load()

    assert config.symbols == ["SOL/USD", "BTC/USD"]
    assert config.storage.on_decode_error == "skip"
    assert config.storage.aggregation == "scan"
    assert config.sink.subject == "ticks.raw.SOL_USD"
    assert config.sink.queue == "candle-store"
    assert config.log_level == "DEBUG"


def test_defaults(tmp_path):
    config = ConfigLoader(_write(tmp_path, "symbols: [SOL/USD]\n")).load()

    assert config.storage.on_decode_error == "fail"
    assert config.storage.aggregation == "sweep"
    assert config.sink.subject == "ticks.raw.*"
    assert config.sink.queue is None
    assert config.log_level == "INFO"


@pytest.mark.parametrize(
    "text",
    [
        "symbols: []\n",
        "storage: {on_decode_error: fail}\n",
        "symbols: [SOL/USD]\nstorage: {on_decode_error: ignore}\n",
        "symbols: [SOL/USD]\nstorage: {aggregation: fast}\n",
        "symbols: [SOL/USD, SOL/USD]\n",
        "symbols: [SOL/USD]\nlog_level: LOUD\n",
        "symbols: [unclosed\n",
        "- just\n- a list\n",
    ],
)
def test_invalid_config_raises_value_error(tmp_path, text):
    with pytest.raises(ValueError, match="Failed to load"):
        ConfigLoader(_write(tmp_path, text)).load()


def test_missing_file(tmp_path):
    with pytest.raises(ValueError, match="not found"):
        ConfigLoader(tmp_path / "nope.yaml").load()


def test_from_env(monkeypatch):
    monkeypatch.setenv("SYMBOLS", "SOL/USD, BTC/USD")
    monkeypatch.setenv("ON_DECODE_ERROR", "skip")
    monkeypatch.setenv("TICK_QUEUE", "sinks")
    monkeypatch.delenv("AGGREGATION", raising=False)

    config = ServiceConfig.from_env()

    assert config.symbols == ["SOL/USD", "BTC/USD"]
    assert config.storage.on_decode_error == "skip"
    assert config.storage.aggregation == "sweep"
    assert config.sink.queue == "sinks"


def test_load_config_prefers_file(tmp_path, monkeypatch):
    path = _write(tmp_path, "symbols: [ETH/USD]\n")
    monkeypatch.setenv("CONFIG_FILE", str(path))
    monkeypatch.setenv("SYMBOLS", "SOL/USD")

    assert load_config().symbols == ["ETH/USD"]

    monkeypatch.delenv("CONFIG_FILE")
    assert load_config().symbols == ["SOL/USD"]
