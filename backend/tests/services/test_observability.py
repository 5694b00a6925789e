"""Structured Logging — JSON formatter output."""

import json
import logging

from app.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord("app.test", logging.INFO, __file__, 1, "Handler executed", None, None)
    record.__dict__.update(extra)
    return record


def test_json_formatter_surfaces_dispatch_fields():
    line = JSONFormatter().format(_record(
        request_id="r-1", request_name="LogIn", module_name="ADMIN", duration_ms=1.5,
    ))
    payload = json.loads(line)
    assert payload["message"] == "Handler executed"
    assert payload["request_name"] == "LogIn"
    assert payload["module_name"] == "ADMIN"
    assert payload["duration_ms"] == 1.5
    assert "handler" not in payload


def test_setup_logging_does_not_stack_handlers():
    setup_logging("INFO", "text")
    before = len(logging.root.handlers)
    setup_logging("DEBUG", "text")
    setup_logging("INFO", "json")
    assert len(logging.root.handlers) == before
    assert isinstance(logging.root.handlers[-1].formatter, JSONFormatter)
