"""Request/Store Logging — one root handler, JSON or key=value text.

Invariants:
    - Every line carries the record's own timestamp, level, logger name and message
    - Only the user-service context keys in EXTRA_FIELDS are surfaced; other extras are dropped
    - Exactly one user-service handler on the root logger, however often setup runs

Design Decisions:
    - Both formats share _context(): a log line means the same thing in dev and prod
    - Timestamps come from record.created, not format time, so buffered lines keep order
"""

import logging
import json
from datetime import datetime, timezone

EXTRA_FIELDS = ("user_id", "error_code", "path", "method", "operation")

_HANDLER_NAME = "user-service"
_TEXT_LAYOUT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def _context(record: logging.LogRecord) -> dict:
    return {
        key: record.__dict__[key]
        for key in EXTRA_FIELDS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        line = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context(record),
        }
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable line with the same context appended as key=value pairs."""

    def __init__(self):
        super().__init__(_TEXT_LAYOUT)

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        context = _context(record)
        if not context:
            return text
        head, sep, trace = text.partition("\n")
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{head} [{pairs}]{sep}{trace}"


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Install the user-service handler on the root logger."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
