"""
Document Store Balance Ledger

Read-modify-write balance maintenance on top of a document store with
single-document writes only.

KNOWN CONSISTENCY LIMITS (current behaviour, kept on purpose):
1. The transaction write and the wallet write(s) are separate. If the
   process dies in between, the wallet balance is stale and nothing
   repairs it.
2. If the wallet document is missing when its balance is read, the
   balance write is skipped and the transaction write still stands.
   The amount is then reflected nowhere. We log it; we don't raise.
3. No version check on the wallet: two clients amending the same
   wallet at once can lose an update (last write wins).
4. Nothing is idempotent. Replaying record_creation applies the
   amount twice.
"""

from typing import Optional
from uuid import UUID

from walletbook.audit import AuditLogger, create_correlation_id
from walletbook.ledger.interface import BalanceLedger, signed_amount
from walletbook.models.finance import (
    Transaction,
    TransactionInput,
    TransactionPatch,
)
from walletbook.repositories.finance import TRANSACTIONS, WALLETS
from walletbook.repositories.mapping import (
    transaction_patch_to_document,
    transaction_to_document,
)
from walletbook.services.storage import (
    DocumentStoreInterface,
    user_collection,
    user_document,
)


class DocumentStoreBalanceLedger(BalanceLedger):
    """
    Balance ledger that writes straight to the document store.

    Each balance step reads the wallet, adds a signed delta, and writes
    the result back.
    """

    def __init__(
        self,
        store: DocumentStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger

    async def _adjust_balance(
        self,
        user_id: str,
        wallet_id: str,
        delta: int,
        correlation_id: UUID,
    ) -> bool:
        """
        Add `delta` to a wallet's stored balance.

        Returns False (and writes nothing) if the wallet doesn't exist.
        """
        wallet_path = user_document(user_id, WALLETS, wallet_id)
        wallet = await self._store.get(wallet_path)

        if wallet is None:
            if self._audit_logger:
                await self._audit_logger.log_balance_write_skipped(
                    user_id=user_id,
                    wallet_id=wallet_id,
                    delta=delta,
                    correlation_id=correlation_id,
                )
            return False

        current = wallet.get("balance") or 0
        new_balance = current + delta
        await self._store.update(wallet_path, {"balance": new_balance})

        if self._audit_logger:
            await self._audit_logger.log_balance_adjusted(
                user_id=user_id,
                wallet_id=wallet_id,
                previous_balance=current,
                new_balance=new_balance,
                correlation_id=correlation_id,
            )
        return True

    async def record_creation(self, user_id: str, tx: TransactionInput) -> str:
        correlation_id = create_correlation_id()

        transaction_id = await self._store.create(
            user_collection(user_id, TRANSACTIONS),
            transaction_to_document(tx),
        )

        if self._audit_logger:
            await self._audit_logger.log_transaction_created(
                user_id=user_id,
                transaction_id=transaction_id,
                tx_type=tx.type.value,
                amount=tx.amount,
                wallet_id=tx.wallet_id,
                correlation_id=correlation_id,
            )

        await self._adjust_balance(
            user_id,
            tx.wallet_id,
            signed_amount(tx.type, tx.amount),
            correlation_id,
        )
        return transaction_id

    async def record_amendment(
        self,
        user_id: str,
        transaction_id: str,
        patch: TransactionPatch,
        previous: Transaction,
    ) -> None:
        correlation_id = create_correlation_id()

        # The patch is written whether or not the balance steps succeed
        data = transaction_patch_to_document(patch)
        await self._store.update(
            user_document(user_id, TRANSACTIONS, transaction_id),
            data,
        )

        if self._audit_logger:
            await self._audit_logger.log_transaction_amended(
                user_id=user_id,
                transaction_id=transaction_id,
                changed_fields=sorted(patch.model_dump(exclude_none=True)),
                correlation_id=correlation_id,
            )

        if not patch.touches_balance:
            return

        # (a) reverse the old effect on the old wallet
        await self._adjust_balance(
            user_id,
            previous.wallet_id,
            -signed_amount(previous.type, previous.amount),
            correlation_id,
        )

        # (b) apply the new effect on the (possibly different) wallet
        current = previous.amended(patch)
        await self._adjust_balance(
            user_id,
            current.wallet_id,
            signed_amount(current.type, current.amount),
            correlation_id,
        )

    async def record_deletion(
        self,
        user_id: str,
        transaction_id: str,
        snapshot: Transaction,
    ) -> None:
        correlation_id = create_correlation_id()

        await self._store.delete(user_document(user_id, TRANSACTIONS, transaction_id))

        if self._audit_logger:
            await self._audit_logger.log_transaction_deleted(
                user_id=user_id,
                transaction_id=transaction_id,
                tx_type=snapshot.type.value,
                amount=snapshot.amount,
                wallet_id=snapshot.wallet_id,
                correlation_id=correlation_id,
            )

        await self._adjust_balance(
            user_id,
            snapshot.wallet_id,
            -signed_amount(snapshot.type, snapshot.amount),
            correlation_id,
        )
