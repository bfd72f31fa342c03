"""
Configuration Management for the Arthik client

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here, so the backend location, retry policy
and local storage paths are visible in one place and validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """Backend REST API configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ARTHIK_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    base_url: str = Field(
        default="http://localhost:8080/api",
        description="Base URL of the backend API (no trailing slash)"
    )
    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-request timeout; None waits until the backend answers"
    )

    # Retry policy for idempotent reads
    retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for GET requests that fail at the transport level"
    )
    retry_wait_min: float = Field(
        default=0.5,
        ge=0.0,
        description="Minimum back-off between GET retries (seconds)"
    )
    retry_wait_max: float = Field(
        default=4.0,
        ge=0.0,
        description="Maximum back-off between GET retries (seconds)"
    )

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Paths are joined with a leading slash."""
        return v.rstrip("/")


class ClientSettings(BaseSettings):
    """
    Client behaviour settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARTHIK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Ledger pagination
    page_size: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Transactions shown per ledger page"
    )

    # Window resize handling
    resize_debounce_seconds: float = Field(
        default=0.25,
        ge=0.25,
        description="Quiet period before a resize reloads the dashboard"
    )

    # Local storage
    session_file: Optional[str] = Field(
        default=None,
        description="File holding the session token; unset keeps it in memory"
    )
    preferences_file: str = Field(
        default=str(Path.home() / ".arthik" / "preferences.json"),
        description="File holding durable display preferences"
    )

    # Display
    currency_symbol: str = Field(
        default="Rs",
        max_length=5,
        description="Prefix used when formatting amounts"
    )
    event_history_size: int = Field(
        default=200,
        ge=10,
        le=5000,
        description="Client events kept in memory for diagnostics"
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

    @property
    def api(self) -> ApiSettings:
        return ApiSettings()

    @property
    def client(self) -> ClientSettings:
        return ClientSettings()


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

    Returns a dict of {setting_name: is_valid}, with an extra
    `<name>_error` entry describing each failure. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.api
        results["api"] = True
    except Exception as e:
        results["api"] = False
        results["api_error"] = str(e)

    try:
        _ = settings.client
        results["client"] = True
    except Exception as e:
        results["client"] = False
        results["client_error"] = str(e)

    return results
