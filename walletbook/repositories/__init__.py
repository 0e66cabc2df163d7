"""Repositories for wallets, categories and (read-only) transactions."""

from walletbook.repositories.finance import (
    CATEGORIES,
    TRANSACTIONS,
    WALLETS,
    CategoryRepository,
    TransactionRepository,
    WalletRepository,
)

__all__ = [
    "CATEGORIES",
    "TRANSACTIONS",
    "WALLETS",
    "CategoryRepository",
    "TransactionRepository",
    "WalletRepository",
]
