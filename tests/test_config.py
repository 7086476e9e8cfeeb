"""Unit tests for environment-driven configuration."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import importlib
import config


def test_debounce_seconds_read_from_environment(monkeypatch):
    monkeypatch.setenv("DEBOUNCE_SECONDS", "0.25")
    try:
        assert importlib.reload(config).DEBOUNCE_SECONDS == 0.25
    finally:
        monkeypatch.delenv("DEBOUNCE_SECONDS")
        importlib.reload(config)


def test_debounce_seconds_default(monkeypatch):
    monkeypatch.delenv("DEBOUNCE_SECONDS", raising=False)
    monkeypatch.setattr("dotenv.load_dotenv", lambda *args, **kwargs: False)

    assert importlib.reload(config).DEBOUNCE_SECONDS == 0.5
