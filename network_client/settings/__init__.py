"""Settings package exports."""

from .loader import (
    CONFIG_ENV_VAR,
    ClientSettings,
    LoggingSettings,
    load_settings,
    settings_from_mapping,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "ClientSettings",
    "LoggingSettings",
    "load_settings",
    "settings_from_mapping",
]
