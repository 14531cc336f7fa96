"""Configuration package."""

from hometrack.config.settings import (
    PLACEHOLDER_ANON_KEY,
    PLACEHOLDER_URL,
    AppSettings,
    Settings,
    SupabaseSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "PLACEHOLDER_ANON_KEY",
    "PLACEHOLDER_URL",
    "AppSettings",
    "Settings",
    "SupabaseSettings",
    "get_settings",
    "validate_all_settings",
]
