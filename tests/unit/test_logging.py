"""
Tests for structlog configuration.
"""

import json
import logging

import pytest
import structlog
from pageclip.config.config import MonitoringConfig
from pageclip.observability.logging import configure_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)
    structlog.reset_defaults()


@pytest.mark.unit
def test_file_logging_writes_json(tmp_path, restore_logging):
    log_file = tmp_path / "logs" / "pageclip.log"
    configure_logging(MonitoringConfig(log_file=str(log_file), log_level="DEBUG"))

    structlog.get_logger("pageclip.test").info("Extraction completed", tag_count=3)
    logging.getLogger("pageclip.stdlib").warning("plain stdlib record")
    for handler in logging.getLogger().handlers:
        handler.flush()

    records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    structured = next(record for record in records if record["event"] == "Extraction completed")
    foreign = next(record for record in records if record["event"] == "plain stdlib record")

    assert structured["tag_count"] == 3
    assert structured["level"] == "info"
    assert structured["logger"] == "pageclip.test"
    assert "timestamp" in structured
    assert foreign["level"] == "warning"


@pytest.mark.unit
def test_bound_url_is_added(tmp_path, restore_logging):
    log_file = tmp_path / "pageclip.log"
    configure_logging(MonitoringConfig(log_file=str(log_file), log_level="INFO"))

    with structlog.contextvars.bound_contextvars(request_url="https://example.com/a"):
        structlog.get_logger("pageclip.test").info("Starting extraction")
    for handler in logging.getLogger().handlers:
        handler.flush()

    records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    record = next(record for record in records if record["event"] == "Starting extraction")
    assert record["url"] == "https://example.com/a"
