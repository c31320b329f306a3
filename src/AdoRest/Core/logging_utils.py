"""Structured logging helpers shared across the pipeline and service clients."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Dict, Optional, TextIO

if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .settings import AdoSettings

__all__ = [
    "JSONFormatter",
    "mask_sensitive_data",
    "setup_logging",
    "setup_logging_from_settings",
    "PACKAGE_LOGGER",
]

PACKAGE_LOGGER = "AdoRest"

_MASK = "***masked***"
_SENSITIVE_KEYS = {
    "authorization",
    "api_key",
    "apikey",
    "token",
    "pat",
    "secret",
    "password",
    "access_token",
}

# LogRecord attributes that are not caller-supplied ``extra`` fields.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys() | {"message", "asctime", "taskName"}
)


def mask_sensitive_data(payload: Dict[str, object]) -> Dict[str, object]:
    """Return a copy of ``payload`` with credential-bearing fields masked."""

    def _mask_value(value: object, key_hint: Optional[str] = None) -> object:
        if isinstance(value, dict):
            return {
                sub_key: _mask_value(sub_value, str(sub_key).lower())
                for sub_key, sub_value in value.items()
            }
        if isinstance(value, list):
            return [_mask_value(item, key_hint) for item in value]
        if isinstance(value, tuple):
            if len(value) == 2 and isinstance(value[0], str):
                return (value[0], _mask_value(value[1], value[0].lower()))
            return tuple(_mask_value(item, key_hint) for item in value)
        if isinstance(value, str):
            lowered = value.lower()
            if key_hint in _SENSITIVE_KEYS:
                return _MASK
            if lowered.startswith(("bearer ", "basic ")):
                return _MASK
        return value

    masked: Dict[str, object] = {}
    for key, value in payload.items():
        lower = key.lower()
        if lower in _SENSITIVE_KEYS:
            masked[key] = _MASK
        else:
            masked[key] = _mask_value(value, lower)
    return masked


class JSONFormatter(logging.Formatter):
    """Formatter emitting masked JSON log lines with any ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        now = datetime.now(timezone.utc)
        payload: Dict[str, object] = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(mask_sensitive_data(payload), default=str)


def setup_logging(
    *,
    level: str = "INFO",
    json_logs: bool = False,
    stream: Optional[TextIO] = None,
    propagate: bool = False,
) -> logging.Logger:
    """Install a managed stream handler on the ``AdoRest`` logger.

    Calling this again replaces the handler it installed previously and leaves
    handlers added by the application alone.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        if getattr(handler, "_adorest_managed", False):
            logger.removeHandler(handler)
            if getattr(handler, "stream", None) not in (sys.stdout, sys.stderr):
                handler.close()

    handler = logging.StreamHandler(stream or sys.stderr)
    if json_logs:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handler._adorest_managed = True  # type: ignore[attr-defined]
    logger.addHandler(handler)

    logger.propagate = propagate
    return logger


def setup_logging_from_settings(
    settings: Optional["AdoSettings"] = None,
    *,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the ``AdoRest`` logger from ``ADO_LOGGING__LEVEL`` / ``ADO_LOGGING__JSON_LOGS``."""

    if settings is None:
        from .settings import get_settings

        settings = get_settings()
    return setup_logging(
        level=settings.logging.level,
        json_logs=settings.logging.json_logs,
        stream=stream,
    )
