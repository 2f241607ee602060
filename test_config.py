"""DetectorConfig defaults and environment parsing."""

import pytest

from netra.config import DEFAULT_SOURCES, DetectorConfig
from netra.errors import ConfigError

ENV_VARS = [
    "NETRA_VOCAB_PATH", "NETRA_MODEL_PATH", "NETRA_MAX_LENGTH", "NETRA_NUM_WORDS",
    "NETRA_THRESHOLD", "NETRA_DEBOUNCE_MS", "NETRA_COOLDOWN_MS",
    "NETRA_MIN_TEXT_LENGTH", "NETRA_SOURCES", "NETRA_NUM_THREADS", "NETRA_WEBHOOK_URL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    config = DetectorConfig()
    assert config.max_length == 100
    assert config.threshold == 0.5
    assert config.debounce_delay_ms == 1500
    assert config.debounce_delay == pytest.approx(1.5)
    assert config.cooldown_ms == 5000
    assert config.min_text_length == 10
    assert config.monitored_sources == DEFAULT_SOURCES
    assert config.num_words is None
    assert config.webhook_url is None


def test_from_env(monkeypatch):
    monkeypatch.setenv("NETRA_THRESHOLD", "0.7")
    monkeypatch.setenv("NETRA_DEBOUNCE_MS", "800")
    monkeypatch.setenv("NETRA_SOURCES", "com.whatsapp, org.telegram.messenger ,")
    monkeypatch.setenv("NETRA_NUM_WORDS", "5000")
    monkeypatch.setenv("NETRA_WEBHOOK_URL", "  ")

    config = DetectorConfig.from_env()
    assert config.threshold == pytest.approx(0.7)
    assert config.debounce_delay_ms == 800
    assert config.monitored_sources == frozenset({"com.whatsapp", "org.telegram.messenger"})
    assert config.num_words == 5000
    assert config.webhook_url is None


@pytest.mark.parametrize(
    "var,value",
    [
        ("NETRA_THRESHOLD", "1.5"),
        ("NETRA_MAX_LENGTH", "0"),
        ("NETRA_COOLDOWN_MS", "-1"),
        ("NETRA_DEBOUNCE_MS", "soon"),
    ],
)
def test_invalid_env_raises_config_error(monkeypatch, var, value):
    monkeypatch.setenv(var, value)
    with pytest.raises(ConfigError):
        DetectorConfig.from_env()


def test_config_is_frozen():
    config = DetectorConfig()
    with pytest.raises(Exception):
        config.threshold = 0.9
