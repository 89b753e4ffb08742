"""Structured Logging — verifies JSON shape and idempotent setup."""

import json
import logging

from campus_portal.infrastructure.observability import (
    JSONFormatter, _PortalHandler, setup_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "campus_portal.test", logging.WARNING, __file__, 1, "Event %s", ("approved",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_core_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "WARNING"
    assert log["logger"] == "campus_portal.test"
    assert log["msg"] == "Event approved"
    assert log["service"] == "campus-portal"
    assert "ts" in log


def test_json_formatter_surfaces_known_extras_only():
    log = json.loads(JSONFormatter().format(
        _record(subject_id="user-1", event_id="e-1", password="hunter2"),
    ))
    assert log["subject_id"] == "user-1"
    assert log["event_id"] == "e-1"
    assert "password" not in log


def test_setup_logging_does_not_stack_handlers():
    setup_logging("DEBUG", "json")
    setup_logging("INFO", "text")
    ours = [h for h in logging.root.handlers if isinstance(h, _PortalHandler)]
    assert len(ours) == 1
    assert logging.root.level == logging.INFO
