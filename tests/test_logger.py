"""Unit tests for logging setup."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import json
import logging
import pytest
from logger import JSONFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way the test found it."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def test_json_formatter_includes_structured_fields():
    record = logging.LogRecord("services.analysis_engine", logging.INFO, __file__, 1, "Analyzed %d posts", (3,), None)
    record.extra = {"keyword": "seo", "total": 25}

    entry = json.loads(JSONFormatter().format(record))

    assert entry["level"] == "INFO"
    assert entry["logger"] == "services.analysis_engine"
    assert entry["message"] == "Analyzed 3 posts"
    assert entry["keyword"] == "seo"
    assert entry["total"] == 25
    assert entry["timestamp"].endswith("Z")


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError("corpus down")
    except RuntimeError:
        record = logging.LogRecord("main", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    entry = json.loads(JSONFormatter().format(record))

    assert "RuntimeError: corpus down" in entry["exception"]


def test_setup_logging_does_not_stack_handlers(restore_root_logger):
    setup_logging("DEBUG", "json")
    setup_logging("WARNING", "text")

    ours = [h for h in restore_root_logger.handlers if h.get_name() == "content_analyzer"]
    assert len(ours) == 1
    assert not isinstance(ours[0].formatter, JSONFormatter)
    assert restore_root_logger.level == logging.WARNING
