"""JSON logging for the wardrobe stylist service.

Every suggestion request, garment upload and Gemini call logs through
:func:`log_event`, which tags the record with the request's correlation id
and scrubs owner ids, locations, stored image paths and inline image data
before anything reaches the handler.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import uuid
from typing import Any, Dict, Iterator

CORRELATION_ID = contextvars.ContextVar("correlation_id", default=None)
_RECORD_KEYS = set(vars(logging.makeLogRecord({}))) | {"message", "taskName"}
_REDACT_KEYS = {
    "owner_id",
    "email",
    "location",
    "image_ref",
    "image_bytes",
    "image_base64",
    "description",
    "styling_tips",
}
_EMAIL_PATTERN = re.compile(r"[\w.\-]+@[\w.\-]+")
_DATA_URI_PATTERN = re.compile(r"data:image/[\w.+\-]+;base64,[A-Za-z0-9+/=]+")


class JsonFormatter(logging.Formatter):
    """One JSON object per record: level, logger, event, correlation id and extras."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "event": getattr(record, "event", message),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        for key, value in record.__dict__.items():
            if key in _RECORD_KEYS or key in payload:
                continue
            payload[key] = redact_for_log(value)
        return json.dumps(payload)


def configure_logging(level: int | str | None = None) -> None:
    """Route root logging through :class:`JsonFormatter` at ``LOG_LEVEL``."""

    logging.root.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=level or os.getenv("LOG_LEVEL", "INFO"), handlers=[handler])


def _redact_string(value: str) -> str:
    value = _DATA_URI_PATTERN.sub("[redacted-image]", value)
    value = _EMAIL_PATTERN.sub("[redacted-email]", value)
    if value.lower().startswith("http"):
        return "[redacted-url]"
    return value


def redact_for_log(payload: Any) -> Any:
    """Scrub owner ids, locations and garment image data from a log payload."""

    if payload is None or isinstance(payload, (int, float, bool)):
        return payload
    if isinstance(payload, str):
        return _redact_string(payload)
    if isinstance(payload, (list, tuple, set)):
        return [redact_for_log(item) for item in payload]
    if isinstance(payload, dict):
        return {
            key: "[redacted]" if key in _REDACT_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    return str(payload)


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Adopt ``correlation_id``, keep the current request's id, or mint one."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    new_id = uuid.uuid4().hex
    CORRELATION_ID.set(new_id)
    return new_id


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with redacted ``fields`` as record extras."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": correlation_id, **redact_for_log(fields)},
    )


@contextlib.contextmanager
def operation_context(name: str, correlation_id: str | None = None) -> Iterator[str]:
    """Scope one correlation id around an agent operation such as a suggestion request."""

    token = CORRELATION_ID.set(correlation_id or CORRELATION_ID.get() or uuid.uuid4().hex)
    try:
        logging.getLogger(__name__).debug("operation %s started", name, extra={"operation": name})
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


__all__ = [
    "JsonFormatter",
    "configure_logging",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "redact_for_log",
    "operation_context",
]
