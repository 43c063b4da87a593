"""Tests for structured logging configuration."""

from __future__ import annotations

import json
import logging

from core.logging_config import (
    JSONFormatter,
    get_logger,
    get_request_id,
    request_log_fields,
    reset_request_id,
    set_request_id,
    setup_logging,
)


def test_json_formatter_outputs_valid_json():
    formatter = JSONFormatter()
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname="test.py",
        lineno=1, msg="hello %s", args=("world",), exc_info=None
    )
    result = formatter.format(record)
    parsed = json.loads(result)
    assert parsed["message"] == "hello world"
    assert parsed["level"] == "INFO"
    assert parsed["logger"] == "test"
    assert "timestamp" in parsed


def test_json_formatter_includes_exception():
    formatter = JSONFormatter()
    try:
        raise ValueError("test error")
    except ValueError:
        import sys
        exc_info = sys.exc_info()
    record = logging.LogRecord(
        name="test", level=logging.ERROR, pathname="test.py",
        lineno=1, msg="fail", args=(), exc_info=exc_info
    )
    result = formatter.format(record)
    parsed = json.loads(result)
    assert parsed["exception"]["type"] == "ValueError"
    assert parsed["exception"]["message"] == "test error"


def test_get_logger_returns_named_logger():
    log = get_logger("my.module")
    assert log.name == "my.module"
    assert isinstance(log, logging.Logger)


def test_setup_logging_idempotent():
    root = logging.getLogger()
    initial_count = len(root.handlers)
    setup_logging()
    setup_logging()
    # Should not add duplicate handlers
    assert len(root.handlers) <= initial_count + 1


def test_json_formatter_nests_ctx_extras():
    formatter = JSONFormatter()
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname="test.py",
        lineno=1, msg="plan_generated", args=(), exc_info=None
    )
    record.ctx_total_miles = 17.1
    record.ctx_week_start = "2026-03-02"
    parsed = json.loads(formatter.format(record))
    assert parsed["context"] == {"total_miles": 17.1, "week_start": "2026-03-02"}


def test_json_formatter_includes_request_id():
    formatter = JSONFormatter()
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname="test.py",
        lineno=1, msg="hello", args=(), exc_info=None
    )
    token = set_request_id("req-123")
    try:
        parsed = json.loads(formatter.format(record))
    finally:
        reset_request_id(token)
    assert parsed["request_id"] == "req-123"
    assert get_request_id() is None


def test_request_log_fields_are_ctx_prefixed():
    fields = request_log_fields(method="POST", path="/api/v1/plans/weekly", status_code=200, duration_ms=12.3456, client_ip=None)
    assert fields == {
        "ctx_method": "POST",
        "ctx_path": "/api/v1/plans/weekly",
        "ctx_status_code": 200,
        "ctx_duration_ms": 12.35,
        "ctx_client_ip": "",
    }
