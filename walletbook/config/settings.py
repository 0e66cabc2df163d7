"""
Configuration Management for Walletbook

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FirestoreSettings(BaseSettings):
    """Cloud Firestore document store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FIRESTORE_",
        extra="ignore"
    )

    project_id: str = Field(
        ...,
        description="Google Cloud project that owns the Firestore database"
    )
    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


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

    # Money
    max_amount_digits: int = Field(
        default=12,
        ge=1,
        le=18,
        description="Maximum number of digits accepted for a transaction amount"
    )

    # Registration rules
    min_password_length: int = Field(
        default=6,
        ge=1,
        description="Minimum password length accepted at registration"
    )

    # Placeholders for dangling category references
    unknown_category_name: str = Field(default="Unknown")
    unknown_category_icon: str = Field(default="📦")
    unknown_category_color: str = Field(default="#888")

    @property
    def max_amount(self) -> int:
        """Largest amount representable with max_amount_digits."""
        return 10 ** self.max_amount_digits - 1


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
    def firestore(self) -> FirestoreSettings:
        return FirestoreSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.firestore
        results["firestore"] = True
    except Exception as e:
        results["firestore"] = False
        results["firestore_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
