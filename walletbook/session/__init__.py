"""Session package: identity, auth boundary and first-login seeding."""

from walletbook.session.auth import (
    AuthError,
    AuthProviderInterface,
    friendly_auth_message,
)
from walletbook.session.manager import SessionContext, SessionManager
from walletbook.session.seeding import (
    DEFAULT_CATEGORIES,
    DEFAULT_WALLET,
    DefaultDataSeeder,
)

__all__ = [
    "AuthError",
    "AuthProviderInterface",
    "DEFAULT_CATEGORIES",
    "DEFAULT_WALLET",
    "DefaultDataSeeder",
    "SessionContext",
    "SessionManager",
    "friendly_auth_message",
]
