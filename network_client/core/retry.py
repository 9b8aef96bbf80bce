"""Classification of transport errors into retry or propagate."""

from __future__ import annotations

import socket
import ssl
from enum import Enum
from typing import Iterator

import requests
from urllib3.exceptions import NameResolutionError, ProtocolError


class ErrorKind(str, Enum):
    CONNECTION_REFUSED = "connection_refused"
    SERVICE_UNAVAILABLE = "service_unavailable"
    PROTOCOL = "protocol"
    READ_TIMEOUT = "read_timeout"
    CONNECT_TIMEOUT = "connect_timeout"
    TLS = "tls"
    DNS = "dns"
    OTHER = "other"


RETRYABLE_KINDS = frozenset(
    {
        ErrorKind.CONNECTION_REFUSED,
        ErrorKind.SERVICE_UNAVAILABLE,
        ErrorKind.PROTOCOL,
        ErrorKind.READ_TIMEOUT,
        ErrorKind.CONNECT_TIMEOUT,
        ErrorKind.TLS,
        ErrorKind.DNS,
    }
)


def _iter_causes(exc: BaseException) -> Iterator[BaseException]:
    """Walk the chain of wrapped errors that ``requests``/``urllib3`` build up."""

    seen: set[int] = set()
    pending: list[BaseException] = [exc]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        for linked in (current.__cause__, current.__context__, getattr(current, "reason", None)):
            if isinstance(linked, BaseException):
                pending.append(linked)
        pending.extend(arg for arg in current.args if isinstance(arg, BaseException))


def _classify_connection_error(exc: requests.ConnectionError) -> ErrorKind:
    causes = list(_iter_causes(exc))
    if any(isinstance(cause, (NameResolutionError, socket.gaierror)) for cause in causes):
        return ErrorKind.DNS
    if any(isinstance(cause, ConnectionRefusedError) for cause in causes):
        return ErrorKind.CONNECTION_REFUSED
    if any(isinstance(cause, ssl.SSLError) for cause in causes):
        return ErrorKind.TLS
    # Resets, aborted connections, proxy failures and anything else the
    # connection layer reports are treated as generic protocol errors.
    return ErrorKind.PROTOCOL


def classify(exc: BaseException) -> ErrorKind:
    """Map a transport error to its :class:`ErrorKind`.

    Order matters: ``requests`` makes ``SSLError`` and ``ConnectTimeout``
    subclasses of ``ConnectionError``, so the specific kinds are checked first.
    """

    if isinstance(exc, requests.exceptions.SSLError):
        return ErrorKind.TLS
    if isinstance(exc, requests.exceptions.ConnectTimeout):
        return ErrorKind.CONNECT_TIMEOUT
    if isinstance(exc, requests.exceptions.ReadTimeout):
        return ErrorKind.READ_TIMEOUT
    if isinstance(exc, requests.ConnectionError):
        return _classify_connection_error(exc)
    if isinstance(exc, (requests.exceptions.ChunkedEncodingError, ProtocolError)):
        return ErrorKind.PROTOCOL
    if isinstance(exc, requests.HTTPError):
        response = exc.response
        if response is not None and response.status_code == 503:
            return ErrorKind.SERVICE_UNAVAILABLE
    return ErrorKind.OTHER


def is_retryable(exc: BaseException) -> bool:
    return classify(exc) in RETRYABLE_KINDS


__all__ = ["ErrorKind", "RETRYABLE_KINDS", "classify", "is_retryable"]
