"""Form validation package."""

from walletbook.validation.validator import (
    RegistrationValidator,
    TransactionValidator,
    WalletValidator,
    get_user_friendly_summary,
)

__all__ = [
    "RegistrationValidator",
    "TransactionValidator",
    "WalletValidator",
    "get_user_friendly_summary",
]
