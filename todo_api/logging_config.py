"""Logging setup: JSON lines in production, readable text in development."""

import json
import logging
from datetime import datetime, timezone

_EXTRA_KEYS = ("request_id", "method", "path", "status_code", "duration_ms", "error_code")


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class _AppHandler(logging.StreamHandler):
    """Marker type so repeated setup calls replace only our own handler."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install a single stream handler on the root logger.

    Safe to call more than once: a handler installed by a previous call is
    removed first.
    """
    root = logging.getLogger()
    for h in list(root.handlers):
        if isinstance(h, _AppHandler):
            root.removeHandler(h)

    handler = _AppHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
