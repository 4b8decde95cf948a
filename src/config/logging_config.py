"""
Logging setup for the review notifier.

Cloud Functions ships stdout to Cloud Logging, which parses one JSON
object per line and lifts ``severity``, ``message`` and
``logging.googleapis.com/sourceLocation`` into the log entry. Locally a
plain one-line format is easier to read.

Every line written during an invocation carries the trigger's event id.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Set by the trigger for the duration of one invocation
event_id_var: ContextVar[Optional[str]] = ContextVar('event_id', default=None)

SOURCE_LOCATION_KEY = "logging.googleapis.com/sourceLocation"

QUIET_LOGGERS = ("urllib3", "google", "firebase_admin")


def _context_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Event id plus anything passed as ``extra={'extra_data': {...}}``."""
    fields: Dict[str, Any] = {}
    event_id = event_id_var.get()
    if event_id:
        fields["event_id"] = event_id
    extra_data = getattr(record, 'extra_data', None)
    if extra_data:
        fields.update(extra_data)
    return fields


class JsonFormatter(logging.Formatter):
    """One Cloud Logging structured entry per record."""

    def format(self, record: logging.LogRecord) -> str:
        # Context first so extra_data cannot shadow the Cloud Logging fields
        entry: Dict[str, Any] = _context_fields(record)
        entry.update({
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "severity": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            SOURCE_LOCATION_KEY: {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            },
        })

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class ReadableFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL logger: message key=value ...`` for local runs."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')
        line = f"{timestamp} {record.levelname:<8} {record.name}: {record.getMessage()}"

        fields = _context_fields(record)
        if fields:
            line += " " + " ".join(f"{key}={value}" for key, value in fields.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """
    Route all logging to stdout through a single handler.

    Safe to call more than once; earlier handlers on the root logger are
    replaced.

    Args:
        level: Root log level name
        json_output: Emit Cloud Logging JSON instead of readable lines
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if json_output else ReadableFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
