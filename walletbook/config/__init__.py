"""Configuration package."""

from walletbook.config.settings import (
    AppSettings,
    FirestoreSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "FirestoreSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
