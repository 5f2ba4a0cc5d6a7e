"""Root logger configuration.

``LOG_FORMAT=json`` (the default) writes one JSON object per line for the
log shipper; ``text`` is meant for a local terminal.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from pastoral.core.config import settings

# Set through ``extra=`` by the middleware and error handlers
CONTEXT_FIELDS = ("request_id", "error_code", "status_code", "path", "method", "exception_type")

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s [%(request_id)s] %(message)s"

QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "botocore", "httpx")


class RequestIDDefaultFilter(logging.Filter):
    """Give every record a ``request_id`` so the text format never fails."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        return True


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value not in (None, "-"):
                entry[field] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging() -> None:
    if settings.log_format == "json":
        formatter: logging.Formatter = JsonLogFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt="%H:%M:%S")

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.addFilter(RequestIDDefaultFilter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    # Replaces whatever uvicorn or a previous import installed
    root.handlers = [handler]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
