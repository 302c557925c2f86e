"""Configuration package."""

from smartspend.config.settings import (
    AppSettings,
    ConfigurationError,
    GeminiSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ConfigurationError",
    "GeminiSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
