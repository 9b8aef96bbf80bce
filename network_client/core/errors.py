"""Errors raised by the client itself."""

from __future__ import annotations

import json
from typing import Any, Mapping


class NetworkClientError(Exception):
    """Base class for errors raised by this library."""

    def __init__(self, message: str = "", *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = dict(details or {})

    def __str__(self) -> str:
        base = super().__str__()
        if not self.details:
            return base
        try:
            detail_repr = json.dumps(self.details, ensure_ascii=False)
        except TypeError:
            detail_repr = str(self.details)
        return f"{base} | details: {detail_repr}"


class ConfigurationError(NetworkClientError, ValueError):
    """Raised when the endpoint, retry budget or settings file is invalid."""


class NotSupportedError(NetworkClientError, NotImplementedError):
    """Raised by operations that are declared but not implemented."""
