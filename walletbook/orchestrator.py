"""
Main Orchestrator for Walletbook

This module ties together all the components and defines the action
flows a front end calls:
1. Transactions (validate -> ledger -> result message)
2. Wallets (validate -> repository -> result message)
3. Sign-in / registration (validate -> auth provider -> friendly message)

DESIGN DECISION: This is the UI-action boundary.
- Validation failures stop here and never reach the store
- Store and auth failures are caught here, logged, and turned into a
  message for the screen that triggered the action
- Nothing is retried or queued
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import structlog
from pydantic import BaseModel

from walletbook.audit import AuditLogger
from walletbook.config import validate_all_settings
from walletbook.ledger import BalanceLedger, DocumentStoreBalanceLedger
from walletbook.models.finance import (
    Identity,
    Transaction,
    TransactionInput,
    TransactionPatch,
    TransactionType,
    WalletInput,
    WalletType,
    WalletUpdate,
)
from walletbook.models.validation import ValidationResult
from walletbook.repositories import (
    CategoryRepository,
    TransactionRepository,
    WalletRepository,
)
from walletbook.services.storage import (
    DocumentStoreInterface,
    InMemoryDocumentStore,
    StorageError,
)
from walletbook.session import (
    AuthError,
    AuthProviderInterface,
    DefaultDataSeeder,
    SessionManager,
    friendly_auth_message,
)
from walletbook.validation import (
    RegistrationValidator,
    TransactionValidator,
    WalletValidator,
    get_user_friendly_summary,
)


logger = structlog.get_logger("walletbook.orchestrator")


class ActionResult(BaseModel):
    """Outcome of a user action, ready to show inline."""

    success: bool
    message: str = ""
    entity_id: Optional[str] = None
    identity: Optional[Identity] = None


class _Flow:
    def __init__(self, audit_logger: Optional[AuditLogger]):
        self._audit_logger = audit_logger

    async def _rejected(self, result: ValidationResult) -> ActionResult:
        if self._audit_logger:
            await self._audit_logger.log_validation_failed(
                result.form,
                [
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in result.issues
                ],
            )
        return ActionResult(success=False, message=get_user_friendly_summary(result))

    async def _failed(self, operation: str, error: Exception, user_id: str, message: str) -> ActionResult:
        if self._audit_logger:
            await self._audit_logger.log_storage_error(
                operation=operation,
                error_message=str(error),
                user_id=user_id,
            )
        return ActionResult(success=False, message=message)


class TransactionFlow(_Flow):
    """
    Add, amend and delete transactions.

    All three go through the BalanceLedger so wallet balances follow.
    """

    def __init__(
        self,
        ledger: BalanceLedger,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(audit_logger)
        self._ledger = ledger
        self._validator = validator or TransactionValidator()

    async def add(
        self,
        user_id: str,
        tx_type: TransactionType,
        amount,
        category_id: Optional[str],
        wallet_id: Optional[str],
        date: datetime,
        note: Optional[str] = None,
    ) -> ActionResult:
        result = self._validator.validate(amount, category_id, wallet_id)
        if not result.is_valid:
            return await self._rejected(result)

        tx = TransactionInput(
            type=tx_type,
            amount=int(amount),
            category_id=category_id,
            wallet_id=wallet_id,
            date=date,
            note=note or None,
        )
        try:
            transaction_id = await self._ledger.record_creation(user_id, tx)
        except StorageError as e:
            return await self._failed(
                "add_transaction", e, user_id,
                "Failed to save transaction. Please try again.",
            )

        return ActionResult(success=True, message="Transaction saved", entity_id=transaction_id)

    async def amend(
        self,
        user_id: str,
        previous: Transaction,
        patch: TransactionPatch,
    ) -> ActionResult:
        current = previous.amended(patch)
        result = self._validator.validate(current.amount, current.category_id, current.wallet_id)
        if not result.is_valid:
            return await self._rejected(result)

        try:
            await self._ledger.record_amendment(user_id, previous.id, patch, previous)
        except StorageError as e:
            return await self._failed(
                "amend_transaction", e, user_id,
                "Failed to update transaction. Please try again.",
            )

        return ActionResult(success=True, message="Transaction updated", entity_id=previous.id)

    async def delete(self, user_id: str, transaction: Transaction) -> ActionResult:
        try:
            await self._ledger.record_deletion(user_id, transaction.id, transaction)
        except StorageError as e:
            return await self._failed(
                "delete_transaction", e, user_id,
                "Failed to delete transaction. Please try again.",
            )

        return ActionResult(success=True, message="Transaction deleted", entity_id=transaction.id)


class WalletFlow(_Flow):
    """Create, edit and delete wallets."""

    def __init__(
        self,
        wallets: WalletRepository,
        validator: Optional[WalletValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(audit_logger)
        self._wallets = wallets
        self._validator = validator or WalletValidator()

    async def save(
        self,
        user_id: str,
        name: str,
        wallet_type: WalletType = WalletType.CASH,
        icon: str = "💵",
        balance="0",
        wallet_id: Optional[str] = None,
    ) -> ActionResult:
        """
        Create a wallet, or edit one when `wallet_id` is given.

        The opening balance is only used on creation. Editing a wallet
        never changes its balance.
        """
        result = self._validator.validate(name, balance)
        if not result.is_valid:
            return await self._rejected(result)

        try:
            if wallet_id:
                await self._wallets.update(
                    user_id, wallet_id, WalletUpdate(name=name, type=wallet_type, icon=icon)
                )
            else:
                wallet_id = await self._wallets.add(
                    user_id,
                    WalletInput(
                        name=name,
                        type=wallet_type,
                        icon=icon,
                        balance=int(balance) if balance not in (None, "") else 0,
                    ),
                )
        except StorageError as e:
            return await self._failed(
                "save_wallet", e, user_id,
                "Failed to save wallet. Please try again.",
            )

        if self._audit_logger:
            await self._audit_logger.log_wallet_saved(user_id, wallet_id, name)
        return ActionResult(success=True, message="Wallet saved", entity_id=wallet_id)

    async def delete(self, user_id: str, wallet_id: str) -> ActionResult:
        """Delete a wallet. Transactions that reference it are kept."""
        try:
            await self._wallets.delete(user_id, wallet_id)
        except StorageError as e:
            return await self._failed(
                "delete_wallet", e, user_id,
                "Failed to delete wallet. Please try again.",
            )

        if self._audit_logger:
            await self._audit_logger.log_wallet_deleted(user_id, wallet_id)
        return ActionResult(success=True, message="Wallet deleted", entity_id=wallet_id)


class AuthFlow(_Flow):
    """Sign-in and registration screens."""

    def __init__(
        self,
        auth_provider: AuthProviderInterface,
        validator: Optional[RegistrationValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(audit_logger)
        self._auth = auth_provider
        self._validator = validator or RegistrationValidator()

    async def sign_in(self, email: str, password: str) -> ActionResult:
        try:
            identity = await self._auth.sign_in(email, password)
        except AuthError as e:
            logger.warning("sign_in_failed", code=e.code)
            if self._audit_logger:
                await self._audit_logger.log_auth_failed("sign_in", e.code, e.message)
            return ActionResult(success=False, message=friendly_auth_message(e.code, "sign_in"))

        if self._audit_logger:
            await self._audit_logger.log_auth_succeeded(identity.uid, "sign_in")
        return ActionResult(success=True, identity=identity, entity_id=identity.uid)

    async def register(
        self,
        email: str,
        password: str,
        confirm_password: str,
        display_name: Optional[str] = None,
    ) -> ActionResult:
        result = self._validator.validate(email, password, confirm_password)
        if not result.is_valid:
            return await self._rejected(result)

        try:
            identity = await self._auth.sign_up(email, password, display_name)
        except AuthError as e:
            logger.warning("register_failed", code=e.code)
            if self._audit_logger:
                await self._audit_logger.log_auth_failed("register", e.code, e.message)
            return ActionResult(success=False, message=friendly_auth_message(e.code, "register"))

        if self._audit_logger:
            await self._audit_logger.log_auth_succeeded(identity.uid, "register")
        return ActionResult(success=True, identity=identity, entity_id=identity.uid)

    async def sign_out(self) -> ActionResult:
        await self._auth.sign_out()
        return ActionResult(success=True)


@dataclass
class AppComponents:
    """Everything a front end needs, wired to one store."""

    store: DocumentStoreInterface
    audit_logger: AuditLogger
    ledger: BalanceLedger
    wallets: WalletRepository
    categories: CategoryRepository
    transactions: TransactionRepository
    transaction_flow: TransactionFlow
    wallet_flow: WalletFlow
    auth_flow: Optional[AuthFlow] = None
    session_manager: Optional[SessionManager] = None


def create_document_store(use_firestore: bool = True) -> DocumentStoreInterface:
    """
    Firestore when it is configured, otherwise the in-memory store.
    """
    if use_firestore and validate_all_settings().get("firestore"):
        try:
            from walletbook.services.storage.firestore import FirestoreDocumentStore
            return FirestoreDocumentStore()
        except Exception as e:
            logger.warning("firestore_unavailable", error=str(e))

    logger.warning("using_in_memory_store")
    return InMemoryDocumentStore()


def create_app_components(
    store: Optional[DocumentStoreInterface] = None,
    auth_provider: Optional[AuthProviderInterface] = None,
    ledger: Optional[BalanceLedger] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        store: Document store to use. Defaults to create_document_store().
        auth_provider: Authentication provider. Without one, no session
                       manager or auth flow is created.
        ledger: Balance ledger override (e.g. a stricter implementation).
    """
    store = store or create_document_store()
    audit_logger = AuditLogger()
    ledger = ledger or DocumentStoreBalanceLedger(store, audit_logger)

    wallets = WalletRepository(store)
    categories = CategoryRepository(store)
    transactions = TransactionRepository(store)

    auth_flow = None
    session_manager = None
    if auth_provider is not None:
        auth_flow = AuthFlow(auth_provider, audit_logger=audit_logger)
        session_manager = SessionManager(
            auth_provider,
            DefaultDataSeeder(categories, wallets),
            audit_logger=audit_logger,
        )

    return AppComponents(
        store=store,
        audit_logger=audit_logger,
        ledger=ledger,
        wallets=wallets,
        categories=categories,
        transactions=transactions,
        transaction_flow=TransactionFlow(ledger, audit_logger=audit_logger),
        wallet_flow=WalletFlow(wallets, audit_logger=audit_logger),
        auth_flow=auth_flow,
        session_manager=session_manager,
    )
