"""Configuration package."""

from arthik.config.settings import (
    ApiSettings,
    ClientSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "ApiSettings",
    "ClientSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
