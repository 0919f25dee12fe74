"""Structured JSON logging configuration.

Configures Python logging to emit one JSON object per record with the source
location and thread of the call (file, line, thread, thread_name) next to the
usual level, timestamp and message. Inspection fields (event, direction,
method, path, http_version, status_code, body_bytes) are added when the log
call passes them via ``extra``.

Captured bodies may carry secrets, so ``key=value`` pairs that look like
credentials are redacted from the rendered message.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone

# Patterns that should be redacted from log output
_SENSITIVE_PATTERNS = re.compile(
    r"(api.key|secret|password|token|credential|authorization)"
    r"[\"']?[\s]*[=:]\s*[\"']?[^\s\"'&,}]+",
    re.IGNORECASE,
)

_EXTRA_FIELDS = (
    "event",
    "direction",
    "method",
    "path",
    "http_version",
    "status_code",
    "body_bytes",
)

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(filename)s:%(lineno)d [%(threadName)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """Formats log records as JSON with structured fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": self._sanitize(record.getMessage()),
            "file": record.pathname,
            "line": record.lineno,
            "thread": record.thread,
            "thread_name": record.threadName,
        }

        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                entry[name] = getattr(record, name)

        # Exception info
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self._sanitize(
                self.formatException(record.exc_info)
            )

        return json.dumps(entry, default=str)

    @staticmethod
    def _sanitize(text: str) -> str:
        """Remove sensitive values from log text."""
        return _SENSITIVE_PATTERNS.sub("[REDACTED]", text)


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure the root logger.

    Parameters
    ----------
    level:
        Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    fmt:
        ``json`` for structured output, ``text`` for a human-readable line.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
    root.addHandler(handler)
