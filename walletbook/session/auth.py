"""
Authentication Provider Boundary

The authentication provider is an external collaborator: it issues
opaque identities and reports sign-in state changes. We only define the
operations we call and the error codes we translate for the user.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

from walletbook.models.finance import Identity


IdentityCallback = Callable[[Optional[Identity]], Awaitable[None]]
Unsubscribe = Callable[[], None]


class AuthError(Exception):
    """
    Failure reported by the authentication provider.

    `code` is the provider's error code (e.g. 'auth/wrong-password').
    """

    def __init__(self, code: str, message: str = ""):
        self.code = code
        self.message = message or code
        super().__init__(self.message)


# Provider error code -> what we show, per flow
SIGN_IN_MESSAGES = {
    "auth/invalid-email": "Invalid email address",
    "auth/user-not-found": "No account found with this email",
    "auth/wrong-password": "Incorrect password",
    "auth/invalid-credential": "Invalid email or password",
}

REGISTER_MESSAGES = {
    "auth/email-already-in-use": "An account with this email already exists",
    "auth/invalid-email": "Invalid email address",
    "auth/weak-password": "Password is too weak",
}

DEFAULT_MESSAGES = {
    "sign_in": "Failed to sign in. Please try again.",
    "register": "Failed to create account. Please try again.",
}


def friendly_auth_message(code: str, flow: str = "sign_in") -> str:
    """Message for an auth error code in the sign-in or register flow."""
    table = REGISTER_MESSAGES if flow == "register" else SIGN_IN_MESSAGES
    return table.get(code, DEFAULT_MESSAGES.get(flow, DEFAULT_MESSAGES["sign_in"]))


class AuthProviderInterface(ABC):
    """
    Abstract interface for the authentication provider.

    Implementations must call every registered identity callback
    (awaiting it) whenever the signed-in identity changes, including
    once on registration with the current state.
    """

    @abstractmethod
    async def sign_up(
        self,
        email: str,
        password: str,
        display_name: Optional[str] = None,
    ) -> Identity:
        """
        Create an account and sign it in.

        Raises:
            AuthError: With the provider's error code
        """
        pass

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> Identity:
        """
        Sign in with email and password.

        Raises:
            AuthError: With the provider's error code
        """
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        pass

    @abstractmethod
    async def on_identity_change(self, callback: IdentityCallback) -> Unsubscribe:
        """
        Register for identity changes.

        Returns:
            A function that stops further callbacks
        """
        pass
