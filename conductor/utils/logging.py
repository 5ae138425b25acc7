"""
Structured logging for the Conductor producer service.

The CLI configures the root logger once; every other module only asks for a
named logger. Console output is human-readable. With `LOG_JSON=true` each
record becomes one JSON object whose top-level keys include anything passed
through `extra=` (producer ids, error identifiers, column counts).

Usage:
    from conductor.utils.logging import configure_logging, get_logger

    configure_logging(level="INFO", json_logs=False)
    log = get_logger(__name__)
    log.info("Producer registered", extra={"producer_id": "abc"})
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "extra"}

# Third-party loggers kept at WARNING unless the service itself runs at DEBUG.
_LIBRARY_LOGGERS = ("asyncpg", "tenacity")


def _json_formatter(record: logging.LogRecord) -> str:
    """Render a log record as a single-line JSON object."""
    payload: Dict[str, Any] = {
        "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    for key, value in vars(record).items():
        if key not in _STANDARD_ATTRS:
            payload[key] = value
    # Older call sites pass a single `extra` dict attribute.
    if isinstance(getattr(record, "extra", None), dict):
        payload.update(record.extra)
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info
    return json.dumps(payload, default=str)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


def _logging_config(level: str, json_logs: bool) -> Dict[str, Any]:
    library_level = "DEBUG" if level.upper() == "DEBUG" else "WARNING"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "format": "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {"()": JsonFormatter},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "json" if json_logs else "console",
                "level": level,
            }
        },
        "loggers": {name: {"level": library_level} for name in _LIBRARY_LOGGERS},
        "root": {"handlers": ["default"], "level": level},
    }


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    force: bool = True,
) -> None:
    """
    Configure root logging.

    Parameters
    ----------
    level : str
        Logging level name (e.g., "DEBUG", "INFO", "WARNING").
    json_logs : bool
        Emit one JSON object per record instead of console lines.
    force : bool
        Replace an existing configuration. When False and the root logger
        already has handlers, this is a no-op.
    """
    if not force and logging.getLogger().handlers:
        return
    logging.config.dictConfig(_logging_config(level.upper(), json_logs))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["JsonFormatter", "configure_logging", "get_logger"]
