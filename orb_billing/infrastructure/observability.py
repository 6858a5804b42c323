"""Structured Logging — JSON lines for the "orb_billing" logger tree.

Invariants:
    - Each line carries the record's own time (UTC), level, logger and message
    - Request fields passed via `extra=` (method, path, attempt, status_code,
      error_code, elapsed_ms, idempotency_key) are copied when set
    - The library never installs handlers by itself; OrbClient.from_env(configure_logging=True)
      or the application calls setup_logging

Design Decisions:
    - Handler goes on LOGGER_NAME, not the root logger: the host application's
      logging stays untouched
"""

import json
import logging
from datetime import datetime, timezone

LOGGER_NAME = "orb_billing"

REQUEST_FIELDS = (
    "method", "path", "attempt", "status_code",
    "error_code", "elapsed_ms", "idempotency_key",
)

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        line = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        line.update(
            (key, getattr(record, key)) for key in REQUEST_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        # enums and Decimals in extra= fall back to str()
        return json.dumps(line, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json", logger_name: str = LOGGER_NAME) -> logging.Handler:
    """Attach a stream handler to `logger_name` at `level`; returns the handler."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT))
    target = logging.getLogger(logger_name)
    target.addHandler(handler)
    target.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
