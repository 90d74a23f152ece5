"""Structured Logging — JSON formatter and setup for binder log records.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Binding extras (phase, field, media_type, error_code, path, sub_kind, line, offset)
      surfaced when present
    - A record whose exc_info holds a BindError also carries that error's code, phase,
      field and media type; values passed in extra= take precedence
    - MalformedBodyError adds sub_kind and, when known, line/offset into the body
    - JSON format in production, human-readable in development
"""

import logging
import json
from datetime import datetime, timezone
from typing import Any

from reqbind.core.errors import BindError, MalformedBodyError

EXTRA_KEYS = (
    "phase", "field", "media_type", "error_code", "path", "sub_kind", "line", "offset",
)


def bind_error_fields(exc: BindError) -> dict[str, Any]:
    """Log fields describing where and how a bind call failed."""
    fields = {
        "error_code": exc.code,
        "phase": exc.context.phase,
        "field": exc.context.field or getattr(exc, "field", None),
        "media_type": exc.context.media_type or getattr(exc, "media_type", None),
    }
    if isinstance(exc, MalformedBodyError):
        fields.update(sub_kind=exc.sub_kind, line=exc.line, offset=exc.offset)
    return {key: val for key, val in fields.items() if val is not None}


class JSONFormatter(logging.Formatter):
    """Format binder logs as JSON, one object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and isinstance(record.exc_info[1], BindError):
            log.update(bind_error_fields(record.exc_info[1]))
        for key in EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Attach one stream handler to the root logger and return it."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
