"""Minimal JSON REST client bound to a single endpoint."""

from .core import (
    DEFAULT_HEADERS,
    Client,
    ConfigurationError,
    Endpoint,
    ErrorKind,
    NetworkClientError,
    NotSupportedError,
    Result,
)
from .settings import ClientSettings, load_settings

__all__ = [
    "DEFAULT_HEADERS",
    "Client",
    "ClientSettings",
    "ConfigurationError",
    "Endpoint",
    "ErrorKind",
    "NetworkClientError",
    "NotSupportedError",
    "Result",
    "load_settings",
]
