"""Tests for logging setup and the JSON formatter."""

import json
import logging
import sys

import pytest

from todo_api.logging_config import JSONFormatter, setup_logging


@pytest.fixture(name="root_logger")
def root_logger_fixture():
    """Restore the root logger's handlers and level after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="todo_api.test", level=logging.INFO, pathname=__file__,
        lineno=1, msg=msg, args=(), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        payload = json.loads(JSONFormatter().format(_record("hello")))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "todo_api.test"
        assert payload["message"] == "hello"
        assert "timestamp" in payload
        assert "request_id" not in payload

    def test_extra_fields_surface(self):
        record = _record("req", request_id="abc", status_code=200)
        payload = json.loads(JSONFormatter().format(record))
        assert payload["request_id"] == "abc"
        assert payload["status_code"] == 200

    def test_exception_included(self):
        try:
            raise RuntimeError("kaboom")
        except RuntimeError:
            record = _record("failed")
            record.exc_info = sys.exc_info()
        payload = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: kaboom" in payload["exception"]


class TestSetupLogging:
    def test_setup_is_idempotent(self, root_logger):
        before = len(root_logger.handlers)
        setup_logging("DEBUG", "json")
        setup_logging("WARNING", "text")
        assert len(root_logger.handlers) == before + 1
        assert root_logger.level == logging.WARNING

    def test_json_format_selects_json_formatter(self, root_logger):
        setup_logging("INFO", "json")
        assert isinstance(root_logger.handlers[-1].formatter, JSONFormatter)

    def test_unknown_level_falls_back_to_info(self, root_logger):
        setup_logging("chatty", "text")
        assert root_logger.level == logging.INFO
