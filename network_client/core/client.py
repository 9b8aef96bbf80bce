"""JSON REST client bound to a single endpoint, with flat retry support."""

from __future__ import annotations

import logging
import urllib.parse
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping

import requests

from ..utils.logging import default_logger
from .errors import ConfigurationError, NotSupportedError
from .retry import RETRYABLE_KINDS, classify

if TYPE_CHECKING:
    from ..settings import ClientSettings


DEFAULT_HEADERS: Mapping[str, str] = {
    "accept": "application/json",
    "Content-Type": "application/json",
}
_DEFAULT_PORTS = {"http": 80, "https": 443}
_QUERY_METHODS = {"GET", "DELETE"}


@dataclass(frozen=True, slots=True)
class Endpoint:
    scheme: str
    host: str
    port: int

    @classmethod
    def parse(cls, uri: str) -> "Endpoint":
        """Keep scheme, host and port of ``uri``; everything else is dropped."""
        if not isinstance(uri, str):
            raise ConfigurationError(
                "Endpoint must be a URI string", details={"endpoint": repr(uri)}
            )
        try:
            parsed = urllib.parse.urlsplit(uri.strip())
            port = parsed.port
        except ValueError as exc:
            raise ConfigurationError(
                "Endpoint is not a valid URI", details={"endpoint": uri, "reason": str(exc)}
            ) from exc

        scheme = parsed.scheme.lower()
        if scheme not in _DEFAULT_PORTS:
            raise ConfigurationError(
                "Endpoint scheme must be http or https", details={"endpoint": uri}
            )
        if not parsed.hostname:
            raise ConfigurationError("Endpoint has no host", details={"endpoint": uri})
        if port == 0:
            raise ConfigurationError("Endpoint port must not be 0", details={"endpoint": uri})
        if port is None:
            port = _DEFAULT_PORTS[scheme]
        return cls(scheme=scheme, host=parsed.hostname, port=port)

    @property
    def use_tls(self) -> bool:
        return self.scheme == "https"

    @property
    def origin(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.scheme}://{host}:{self.port}"


@dataclass(frozen=True, slots=True)
class Result:
    code: str
    body: Any


class Client:
    """HTTP client configured with a single endpoint.

    Requests target paths relative to that endpoint. The verb methods return a
    :class:`Result` holding the status code and the JSON-decoded body; when the
    body is not JSON the raw :class:`requests.Response` is returned instead.

    Non-2xx responses are logged and returned as data. Only transport errors
    classified as retryable are retried, up to ``tries`` attempts per call.
    """

    def __init__(
        self,
        endpoint: str,
        tries: int = 1,
        headers: Mapping[str, str] | None = None,
        *,
        logger: logging.Logger | None = None,
        verify_tls: bool = True,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not isinstance(tries, int) or isinstance(tries, bool) or tries < 1:
            raise ConfigurationError(
                "tries must be a positive integer", details={"tries": repr(tries)}
            )

        self._endpoint = Endpoint.parse(endpoint)
        self._tries = tries
        self._timeout = timeout
        self._verify_tls = verify_tls
        self._default_headers = self._merge_headers(DEFAULT_HEADERS, headers)
        if session is None:
            session = requests.Session()
            # No .netrc credentials or proxy settings picked up from the environment.
            session.trust_env = False
        self._session = session
        self._logger = logger if logger is not None else default_logger()

        if self._endpoint.use_tls and not verify_tls:
            self._logger.warning(
                "TLS certificate verification is disabled for %s", self._endpoint.origin
            )

    @classmethod
    def from_settings(
        cls,
        settings: "ClientSettings",
        *,
        logger: logging.Logger | None = None,
        session: requests.Session | None = None,
    ) -> "Client":
        if logger is None:
            logger = default_logger(
                level=settings.logging.level, structured=settings.logging.structured
            )
        return cls(
            settings.endpoint,
            tries=settings.tries,
            headers=settings.headers,
            logger=logger,
            verify_tls=settings.verify_tls,
            timeout=settings.timeout,
            session=session,
        )

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    @property
    def tries(self) -> int:
        return self._tries

    @property
    def verify_tls(self) -> bool:
        return self._verify_tls

    @property
    def default_headers(self) -> dict[str, str]:
        return dict(self._default_headers)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def set_logger(self, logger: logging.Logger | None = None) -> logging.Logger:
        self._logger = logger if logger is not None else default_logger()
        return self._logger

    def get(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result | requests.Response:
        return self._request_json("GET", path, params, headers)

    def post(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result | requests.Response:
        return self._request_json("POST", path, params, headers)

    def put(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result | requests.Response:
        return self._request_json("PUT", path, params, headers)

    def delete(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result | requests.Response:
        return self._request_json("DELETE", path, params, headers)

    def post_form(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result | requests.Response:
        raise NotSupportedError("post_form is not supported", details={"path": path})

    def put_form(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result | requests.Response:
        raise NotSupportedError("put_form is not supported", details={"path": path})

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request_json(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None,
        headers: Mapping[str, str] | None,
    ) -> Result | requests.Response:
        response = self._request(method, path, params or {}, headers)
        try:
            body = response.json()
        except requests.exceptions.JSONDecodeError as exc:
            self._logger.error("Parsing response body as JSON failed: %s", exc)
            return response
        return Result(code=str(response.status_code), body=body)

    def _request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any],
        headers: Mapping[str, str] | None,
    ) -> requests.Response:
        merged_headers = self._merge_headers(self._default_headers, headers)
        if method in _QUERY_METHODS:
            target = self.encode_path_params(path, params)
            data = None
        else:
            target = path
            # Sent as the mapping's str() form, not JSON-encoded.
            data = str(params).encode("utf-8")

        prepared = self._session.prepare_request(
            requests.Request(method, self._url(target), headers=merged_headers, data=data)
        )
        response = self._send(prepared)
        if not 200 <= response.status_code < 300:
            self._logger.error(
                "Endpoint responded with a non-success %s code.",
                response.status_code,
                extra={"method": method, "url": prepared.url, "status": response.status_code},
            )
        return response

    def _send(self, prepared: requests.PreparedRequest) -> requests.Response:
        tries_left = self._tries
        while True:
            try:
                # Redirects are surfaced as data; the endpoint never changes.
                return self._session.send(
                    prepared,
                    timeout=self._timeout,
                    verify=self._verify_tls,
                    allow_redirects=False,
                )
            except requests.RequestException as exc:
                kind = classify(exc)
                if kind not in RETRYABLE_KINDS:
                    raise
                tries_left -= 1
                self._logger.warning(
                    "[%s] %s %s failed: %s (attempts left: %d)",
                    kind.value,
                    prepared.method,
                    prepared.url,
                    exc,
                    tries_left,
                    extra={
                        "method": prepared.method,
                        "url": prepared.url,
                        "error_kind": kind.value,
                        "attempts_left": tries_left,
                    },
                )
                if tries_left == 0:
                    raise

    def _url(self, target: str) -> str:
        if not target.startswith("/"):
            target = f"/{target}"
        return f"{self._endpoint.origin}{target}"

    @staticmethod
    def encode_path_params(path: str, params: Mapping[str, Any]) -> str:
        if not params:
            return path
        return "?".join([path, urllib.parse.urlencode(params, doseq=True)])

    @staticmethod
    def _merge_headers(
        base: Mapping[str, str], overrides: Mapping[str, str] | None
    ) -> dict[str, str]:
        headers = dict(base)
        if overrides:
            headers.update({str(k): str(v) for k, v in overrides.items()})
        return headers
