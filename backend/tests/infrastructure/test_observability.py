"""Structured Logging — JSON formatter fields and handler installation."""

import json
import logging
import sys
from datetime import datetime, timezone

from api_scaffold.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord(
        "api_scaffold.test", logging.ERROR, __file__, 1, "boom %s", ("now",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "ERROR"
    assert log["logger"] == "api_scaffold.test"
    assert log["message"] == "boom now"
    assert "timestamp" in log


def test_json_formatter_surfaces_known_extras_only():
    log = json.loads(JSONFormatter().format(
        _record(path="/user", status_code=500, unrelated="x"),
    ))
    assert log["path"] == "/user"
    assert log["status_code"] == 500
    assert "unrelated" not in log


def test_json_formatter_uses_record_creation_time():
    record = _record()
    record.created = 0.0
    log = json.loads(JSONFormatter().format(record))
    assert datetime.fromisoformat(log["timestamp"]) == datetime(1970, 1, 1, tzinfo=timezone.utc)


def test_json_formatter_includes_traceback():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record()
        record.exc_info = sys.exc_info()
    log = json.loads(JSONFormatter().format(record))
    assert "RuntimeError: boom" in log["exception"]


def test_setup_logging_installs_a_single_handler():
    before = list(logging.root.handlers)
    try:
        setup_logging("DEBUG", "json")
        setup_logging("INFO", "text")
        added = [h for h in logging.root.handlers if h not in before]
        assert len(added) == 1
        assert not isinstance(added[0].formatter, JSONFormatter)
        assert logging.root.level == logging.INFO
    finally:
        for handler in logging.root.handlers[:]:
            if handler not in before:
                logging.root.removeHandler(handler)
