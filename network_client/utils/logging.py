"""Logging helpers."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

DEFAULT_LOGGER_NAME = "network_client"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, carrying the request context the client logs.

    ``Client`` attaches ``method``, ``url``, ``status``, ``error_kind`` and
    ``attempts_left`` through ``extra=``; fields a record lacks are omitted.
    """

    context_fields = ("method", "url", "status", "error_kind", "attempts_left")

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (name, getattr(record, name))
            for name in self.context_fields
            if getattr(record, name, None) is not None
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _formatter(structured: bool | None) -> logging.Formatter:
    return JsonFormatter() if structured else logging.Formatter(_TEXT_FORMAT)


def default_logger(
    *,
    level: int | str | None = None,
    structured: bool | None = None,
) -> logging.Logger:
    """Return the library logger, writing DEBUG and up to stdout.

    The handler is only attached once, and never when the application has
    already attached its own handlers to the library logger. ``level`` and
    ``structured`` adjust the logger on every call when given.
    """

    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
    if level is not None:
        logger.setLevel(level)
    if structured is not None:
        formatter = _formatter(structured)
        for handler in logger.handlers:
            handler.setFormatter(formatter)
    return logger


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "JsonFormatter",
    "default_logger",
]
