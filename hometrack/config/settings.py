"""
Configuration Management for Home Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The two Supabase connection parameters decide whether the app talks to
real storage or to a stub that reports "setup incomplete" for every call.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Values shipped in the example .env file; treated the same as "missing".
PLACEHOLDER_URL = "YOUR_SUPABASE_URL_HERE"
PLACEHOLDER_ANON_KEY = "YOUR_SUPABASE_ANON_KEY_HERE"


class SupabaseSettings(BaseSettings):
    """Supabase storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SUPABASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    url: str = Field(
        default="",
        description="Supabase project URL"
    )
    anon_key: str = Field(
        default="",
        description="Supabase public (anon) API key"
    )

    @field_validator("url", "anon_key")
    @classmethod
    def strip_value(cls, v: str) -> str:
        return v.strip()

    @property
    def is_configured(self) -> bool:
        """True when both parameters are present and not placeholders."""
        if not self.url or self.url == PLACEHOLDER_URL:
            return False
        if not self.anon_key or self.anon_key == PLACEHOLDER_ANON_KEY:
            return False
        return True


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )

    # Presentation
    currency_code: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="ISO currency code used when formatting money"
    )

    # Offer the demo dataset on the sign-in screen
    guest_mode_enabled: bool = Field(
        default=True,
        description="Allow browsing the sample data without an account"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def supabase(self) -> SupabaseSettings:
        return SupabaseSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for the setup screen.
    """
    results = {}

    settings = get_settings()

    try:
        results["supabase"] = settings.supabase.is_configured
        if not results["supabase"]:
            results["supabase_error"] = (
                "SUPABASE_URL and SUPABASE_ANON_KEY must be set"
            )
    except Exception as e:
        results["supabase"] = False
        results["supabase_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
