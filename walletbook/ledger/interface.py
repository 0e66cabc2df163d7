"""
Balance Ledger Interface

DESIGN DECISION: Every operation that moves money between a transaction
and a wallet balance goes through this one interface. Callers never
touch wallet balances directly.

The shipped implementation (DocumentStoreBalanceLedger) does plain
read-then-write sequences, because the document store has no
multi-document transactions. A stricter implementation (atomic batch,
append-only ledger with recomputed balances, optimistic-lock retry) can
replace it without changing any caller.
"""

from abc import ABC, abstractmethod

from walletbook.models.finance import (
    Transaction,
    TransactionInput,
    TransactionPatch,
    TransactionType,
)


def signed_amount(tx_type: TransactionType, amount: int) -> int:
    """Effect of a transaction on its wallet: +amount for income, -amount for expense."""
    return amount if tx_type == TransactionType.INCOME else -amount


class BalanceLedger(ABC):
    """Keeps wallet balances in step with transaction mutations."""

    @abstractmethod
    async def record_creation(self, user_id: str, tx: TransactionInput) -> str:
        """
        Persist a new transaction and apply it to its wallet.

        Returns:
            The new transaction's ID

        Raises:
            StorageError: If a store write fails
        """
        pass

    @abstractmethod
    async def record_amendment(
        self,
        user_id: str,
        transaction_id: str,
        patch: TransactionPatch,
        previous: Transaction,
    ) -> None:
        """
        Persist a patch; if it changes amount, type or wallet, move the
        balance effect from the previous state to the new one.

        Args:
            previous: The transaction as it was before the patch

        Raises:
            StorageError: If a store write fails
        """
        pass

    @abstractmethod
    async def record_deletion(
        self,
        user_id: str,
        transaction_id: str,
        snapshot: Transaction,
    ) -> None:
        """
        Delete a transaction and reverse its effect on its wallet.

        Args:
            snapshot: The transaction as it was before deletion

        Raises:
            StorageError: If a store write fails
        """
        pass
