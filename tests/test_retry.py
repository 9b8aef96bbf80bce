from __future__ import annotations

import socket
import ssl

import pytest
import requests
from urllib3.exceptions import NewConnectionError, ProtocolError

from network_client.core.retry import RETRYABLE_KINDS, ErrorKind, classify, is_retryable


def _connection_error(cause: BaseException) -> requests.ConnectionError:
    error = requests.ConnectionError("connection failed")
    error.__cause__ = cause
    return error


def _http_error(status: int) -> requests.HTTPError:
    response = requests.Response()
    response.status_code = status
    return requests.HTTPError(f"{status} error", response=response)


@pytest.mark.parametrize(
    "error,kind",
    [
        (
            _connection_error(ConnectionRefusedError(111, "Connection refused")),
            ErrorKind.CONNECTION_REFUSED,
        ),
        (
            requests.ConnectionError(socket.gaierror(-2, "Name or service not known")),
            ErrorKind.DNS,
        ),
        (_connection_error(ssl.SSLError("handshake failure")), ErrorKind.TLS),
        (requests.exceptions.SSLError("certificate verify failed"), ErrorKind.TLS),
        (requests.exceptions.ConnectTimeout("connect timed out"), ErrorKind.CONNECT_TIMEOUT),
        (requests.exceptions.ReadTimeout("read timed out"), ErrorKind.READ_TIMEOUT),
        (requests.exceptions.ChunkedEncodingError("broken chunk"), ErrorKind.PROTOCOL),
        (requests.ConnectionError(ProtocolError("Connection aborted.")), ErrorKind.PROTOCOL),
        (_http_error(503), ErrorKind.SERVICE_UNAVAILABLE),
    ],
)
def test_retryable_errors_are_classified(error: BaseException, kind: ErrorKind) -> None:
    assert classify(error) is kind
    assert is_retryable(error)


@pytest.mark.parametrize(
    "error",
    [
        _http_error(500),
        requests.exceptions.TooManyRedirects("loop"),
        requests.exceptions.InvalidURL("bad url"),
        requests.exceptions.MissingSchema("no scheme"),
        ValueError("unrelated"),
    ],
)
def test_other_errors_propagate(error: BaseException) -> None:
    assert classify(error) is ErrorKind.OTHER
    assert not is_retryable(error)


def test_refused_connection_found_through_urllib3_wrapping() -> None:
    refused = ConnectionRefusedError(111, "Connection refused")
    new_conn = NewConnectionError(None, "Failed to establish a new connection")
    new_conn.__cause__ = refused
    error = requests.ConnectionError(new_conn)
    assert classify(error) is ErrorKind.CONNECTION_REFUSED


def test_other_is_the_only_non_retryable_kind() -> None:
    assert set(ErrorKind) - RETRYABLE_KINDS == {ErrorKind.OTHER}
