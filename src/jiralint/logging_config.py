"""Structured logging setup shared by every jiralint entry point.

Log lines go to stdout so they interleave with the CI step output. Two
renderings are available:

* text (default): ``<timestamp> <LEVEL> [<correlation id>] <logger>: <message>``
  followed by any ``extra=`` fields as a JSON object;
* JSON lines, enabled with ``JIRALINT_LOG_JSON=true``.

The correlation id is taken from ``JIRALINT_CORR_ID``, then ``GITHUB_RUN_ID``,
and falls back to a random id so a single run can be traced across lines.
Fields whose names look like credentials are replaced with ``***REDACTED***``.
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
import os
import sys
import uuid
from typing import Any

from .utils.logging import redact

REDACTED = "***REDACTED***"
_TRUTHY = {"1", "true", "yes", "on"}
_HANDLER_FLAG = "_jiralint_handler"
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("jiralint", logging.INFO, __file__, 0, "", (), None))
) | {"message", "asctime", "correlation_id"}

_CORRELATION_ID = (
    os.getenv("JIRALINT_CORR_ID") or os.getenv("GITHUB_RUN_ID") or uuid.uuid4().hex
)


def get_correlation_id() -> str:
    """Return the correlation id attached to every record of this run."""

    return _CORRELATION_ID


def _json_enabled() -> bool:
    return os.getenv("JIRALINT_LOG_JSON", "").strip().lower() in _TRUTHY


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: redact(key, value, placeholder=REDACTED)
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class _CorrelationFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id()
        return True


class TextFormatter(logging.Formatter):
    """Human readable formatter that appends ``extra`` fields."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        rendered = super().format(record)
        extras = _extra_fields(record)
        if extras:
            rendered = f"{rendered} {json.dumps(extras, default=str, sort_keys=True)}"
        return rendered


class JsonFormatter(logging.Formatter):
    """Emit one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": get_correlation_id(),
            "run_id": get_correlation_id(),
        }
        payload.update(_extra_fields(record))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _coerce_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(str(level).strip().upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    return numeric


def configure_logging(level: str | int = "INFO") -> None:
    """Install the jiralint handler on the root logger, replacing a previous one."""

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_FLAG, False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(_CorrelationFilter())
    handler.setFormatter(JsonFormatter() if _json_enabled() else TextFormatter())
    setattr(handler, _HANDLER_FLAG, True)
    root.addHandler(handler)
    root.setLevel(_coerce_level(level))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = [
    "REDACTED",
    "JsonFormatter",
    "TextFormatter",
    "configure_logging",
    "get_correlation_id",
    "get_logger",
]
