"""Client, result types and error classification."""

from .client import DEFAULT_HEADERS, Client, Endpoint, Result
from .errors import ConfigurationError, NetworkClientError, NotSupportedError
from .retry import RETRYABLE_KINDS, ErrorKind, classify, is_retryable

__all__ = [
    "DEFAULT_HEADERS",
    "Client",
    "Endpoint",
    "Result",
    "ConfigurationError",
    "NetworkClientError",
    "NotSupportedError",
    "RETRYABLE_KINDS",
    "ErrorKind",
    "classify",
    "is_retryable",
]
