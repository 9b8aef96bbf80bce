"""Utility exports."""

from .logging import JsonFormatter, default_logger

__all__ = [
    "JsonFormatter",
    "default_logger",
]
