"""Helpers for loading client configuration from TOML."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

try:  # pragma: no cover - Python 3.11+ includes tomllib
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older versions
    import tomli as tomllib  # type: ignore[no-redef]

from ..core.errors import ConfigurationError

DEFAULT_CONFIG_NAME = "network_client.toml"
CONFIG_ENV_VAR = "NETWORK_CLIENT_CONFIG"


@dataclass(slots=True)
class LoggingSettings:
    level: int = logging.DEBUG
    structured: bool = False


@dataclass(slots=True)
class ClientSettings:
    endpoint: str
    tries: int = 1
    timeout: float | None = None
    verify_tls: bool = True
    headers: dict[str, str] = field(default_factory=dict)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


def _config_path(explicit: str | os.PathLike[str] | None = None) -> Path:
    candidate: Path
    if explicit:
        candidate = Path(explicit)
    else:
        env_value = os.environ.get(CONFIG_ENV_VAR)
        candidate = Path(env_value) if env_value else Path(DEFAULT_CONFIG_NAME)
    return candidate if candidate.is_absolute() else Path.cwd() / candidate


def _load_toml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("rb") as fp:
        try:
            return tomllib.load(fp)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(
                "Config file is not valid TOML", details={"path": str(path), "reason": str(exc)}
            ) from exc


def _parse_level(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    level = logging.getLevelName(str(value).upper())
    if not isinstance(level, int):
        raise ConfigurationError("Unknown logging level", details={"level": value})
    return level


def _parse_timeout(value: Any) -> float | None:
    if value is None:
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError("timeout must be a number", details={"timeout": value}) from exc
    if timeout <= 0:
        raise ConfigurationError("timeout must be positive", details={"timeout": value})
    return timeout


def _parse_headers(raw: Any) -> dict[str, str]:
    if not isinstance(raw, Mapping):
        raise ConfigurationError("[client.headers] must be a table", details={"headers": raw})
    return {str(key): str(value) for key, value in raw.items()}


def settings_from_mapping(data: Mapping[str, Any]) -> ClientSettings:
    """Build :class:`ClientSettings` from an already parsed TOML document."""

    client_section = dict(data.get("client", {}))
    logging_section = data.get("logging", {})

    endpoint = client_section.get("endpoint")
    if not endpoint or not isinstance(endpoint, str):
        raise ConfigurationError("[client] endpoint is required")

    tries = client_section.get("tries", 1)
    if not isinstance(tries, int) or isinstance(tries, bool):
        raise ConfigurationError("[client] tries must be an integer", details={"tries": tries})

    verify_tls = client_section.get("verify_tls", True)
    if not isinstance(verify_tls, bool):
        raise ConfigurationError(
            "[client] verify_tls must be a boolean", details={"verify_tls": verify_tls}
        )

    return ClientSettings(
        endpoint=endpoint,
        tries=tries,
        timeout=_parse_timeout(client_section.get("timeout")),
        verify_tls=verify_tls,
        headers=_parse_headers(client_section.get("headers", {})),
        logging=LoggingSettings(
            level=_parse_level(logging_section.get("level", "DEBUG")),
            structured=bool(logging_section.get("structured", False)),
        ),
    )


def load_settings(config_path: str | os.PathLike[str] | None = None) -> ClientSettings:
    path = _config_path(config_path)
    return settings_from_mapping(_load_toml(path))
