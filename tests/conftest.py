"""
Shared fixtures.

Everything runs against the in-memory document store and a fake
authentication provider; no network access.
"""

import asyncio
from typing import Optional

import pytest

from walletbook.audit import AuditLogger
from walletbook.ledger import DocumentStoreBalanceLedger
from walletbook.models.finance import Identity, WalletInput
from walletbook.repositories import (
    CategoryRepository,
    TransactionRepository,
    WalletRepository,
)
from walletbook.services.storage import InMemoryDocumentStore, StorageError
from walletbook.session import AuthError, AuthProviderInterface


USER = "user-1"


class FakeAuthProvider(AuthProviderInterface):
    """Email/password accounts kept in a dict."""

    def __init__(self):
        self.accounts: dict[str, tuple[str, Identity]] = {}
        self.current: Optional[Identity] = None
        self.sign_up_calls = 0
        self._callbacks = []

    async def _notify(self) -> None:
        for callback in list(self._callbacks):
            await callback(self.current)

    async def sign_up(self, email, password, display_name=None) -> Identity:
        self.sign_up_calls += 1
        if email in self.accounts:
            raise AuthError("auth/email-already-in-use")
        if len(password) < 6:
            raise AuthError("auth/weak-password")
        identity = Identity(
            uid=f"uid-{len(self.accounts) + 1}",
            email=email,
            display_name=display_name,
        )
        self.accounts[email] = (password, identity)
        self.current = identity
        await self._notify()
        return identity

    async def sign_in(self, email, password) -> Identity:
        if email not in self.accounts:
            raise AuthError("auth/user-not-found")
        stored_password, identity = self.accounts[email]
        if stored_password != password:
            raise AuthError("auth/wrong-password")
        self.current = identity
        await self._notify()
        return identity

    async def sign_out(self) -> None:
        self.current = None
        await self._notify()

    async def on_identity_change(self, callback):
        self._callbacks.append(callback)
        await callback(self.current)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe


class FailingStore(InMemoryDocumentStore):
    """
    In-memory store that raises StorageError for chosen operations.

    `fail_on` holds (operation, path fragment) pairs, e.g.
    ("update", "/wallets/") fails every wallet update.
    """

    def __init__(self, fail_on: set[tuple[str, str]]):
        super().__init__()
        self.fail_on = fail_on

    def _check(self, operation: str, path: str) -> None:
        for failing_op, fragment in self.fail_on:
            if failing_op == operation and fragment in path:
                raise StorageError(f"Simulated {operation} failure on {path}")

    async def create(self, collection_path, data):
        self._check("create", collection_path)
        return await super().create(collection_path, data)

    async def create_many(self, collection_path, documents):
        self._check("create_many", collection_path)
        return await super().create_many(collection_path, documents)

    async def update(self, doc_path, data):
        self._check("update", doc_path)
        return await super().update(doc_path, data)

    async def delete(self, doc_path):
        self._check("delete", doc_path)
        return await super().delete(doc_path)


class YieldingStore(InMemoryDocumentStore):
    """Suspends after every read, like a real network round-trip."""

    async def get(self, doc_path):
        doc = await super().get(doc_path)
        await asyncio.sleep(0)
        return doc


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def ledger(store, audit_logger):
    return DocumentStoreBalanceLedger(store, audit_logger)


@pytest.fixture
def wallets(store):
    return WalletRepository(store)


@pytest.fixture
def categories(store):
    return CategoryRepository(store)


@pytest.fixture
def transactions(store):
    return TransactionRepository(store)


@pytest.fixture
def auth_provider():
    return FakeAuthProvider()


async def make_wallet(repo: WalletRepository, name: str = "Cash", balance: int = 0) -> str:
    return await repo.add(USER, WalletInput(name=name, balance=balance))
