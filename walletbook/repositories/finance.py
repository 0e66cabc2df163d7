"""
Finance Repositories

Per-user CRUD and live queries for wallets, categories and transactions.

CRITICAL: Transaction WRITES do not live here. Creating, amending or
deleting a transaction moves money, so those go through the
BalanceLedger. This module only reads transactions.
"""

from datetime import datetime
from typing import Callable, Optional

from walletbook.models.finance import (
    Category,
    CategoryInput,
    Transaction,
    Wallet,
    WalletInput,
    WalletUpdate,
)
from walletbook.reports.aggregation import filter_by_range
from walletbook.repositories.mapping import (
    category_to_document,
    document_to_category,
    document_to_transaction,
    document_to_wallet,
    map_documents,
    map_optional,
    wallet_to_document,
    wallet_update_to_document,
)
from walletbook.services.storage import (
    Document,
    DocumentStoreInterface,
    Subscription,
    user_collection,
    user_document,
)


WALLETS = "wallets"
CATEGORIES = "categories"
TRANSACTIONS = "transactions"


class WalletRepository:
    """Wallets, ordered by creation time."""

    def __init__(self, store: DocumentStoreInterface):
        self._store = store

    async def add(self, user_id: str, wallet: WalletInput) -> str:
        return await self._store.create(
            user_collection(user_id, WALLETS),
            wallet_to_document(wallet),
        )

    async def update(self, user_id: str, wallet_id: str, update: WalletUpdate) -> None:
        """
        Edit name, type, icon or color.

        WalletUpdate forbids a balance field, so a balance can't be
        smuggled in through here.
        """
        data = wallet_update_to_document(update)
        if not data:
            return
        await self._store.update(user_document(user_id, WALLETS, wallet_id), data)

    async def delete(self, user_id: str, wallet_id: str) -> None:
        """Delete a wallet. Its transactions are left in place."""
        await self._store.delete(user_document(user_id, WALLETS, wallet_id))

    async def get(self, user_id: str, wallet_id: str) -> Optional[Wallet]:
        doc = await self._store.get(user_document(user_id, WALLETS, wallet_id))
        return map_optional(doc, document_to_wallet)

    async def list_all(self, user_id: str) -> list[Wallet]:
        docs = await self._store.list(user_collection(user_id, WALLETS), "createdAt")
        return map_documents(docs, document_to_wallet)

    async def subscribe(
        self,
        user_id: str,
        callback: Callable[[list[Wallet]], None],
    ) -> Subscription:
        def on_change(docs: list[Document]) -> None:
            callback(map_documents(docs, document_to_wallet))

        return await self._store.subscribe(
            user_collection(user_id, WALLETS), "createdAt", on_change
        )


class CategoryRepository:
    """Categories, ordered by creation time."""

    def __init__(self, store: DocumentStoreInterface):
        self._store = store

    async def add(self, user_id: str, category: CategoryInput) -> str:
        return await self._store.create(
            user_collection(user_id, CATEGORIES),
            category_to_document(category),
        )

    async def add_many(self, user_id: str, categories: list[CategoryInput]) -> list[str]:
        """Create several categories in one batched write."""
        return await self._store.create_many(
            user_collection(user_id, CATEGORIES),
            [category_to_document(category) for category in categories],
        )

    async def update(self, user_id: str, category_id: str, data: dict) -> None:
        await self._store.update(user_document(user_id, CATEGORIES, category_id), data)

    async def delete(self, user_id: str, category_id: str) -> None:
        await self._store.delete(user_document(user_id, CATEGORIES, category_id))

    async def list_all(self, user_id: str) -> list[Category]:
        docs = await self._store.list(user_collection(user_id, CATEGORIES), "createdAt")
        return map_documents(docs, document_to_category)

    async def subscribe(
        self,
        user_id: str,
        callback: Callable[[list[Category]], None],
    ) -> Subscription:
        def on_change(docs: list[Document]) -> None:
            callback(map_documents(docs, document_to_category))

        return await self._store.subscribe(
            user_collection(user_id, CATEGORIES), "createdAt", on_change
        )


class TransactionRepository:
    """Read side of transactions, newest first."""

    def __init__(self, store: DocumentStoreInterface):
        self._store = store

    async def get(self, user_id: str, transaction_id: str) -> Optional[Transaction]:
        doc = await self._store.get(user_document(user_id, TRANSACTIONS, transaction_id))
        return map_optional(doc, document_to_transaction)

    async def list_all(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Transaction]:
        docs = await self._store.list(
            user_collection(user_id, TRANSACTIONS), "date", descending=True
        )
        return filter_by_range(map_documents(docs, document_to_transaction), start, end)

    async def subscribe(
        self,
        user_id: str,
        callback: Callable[[list[Transaction]], None],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Subscription:
        """
        Live transactions, newest first.

        The date window is applied client-side on every push; the
        subscription itself covers the whole collection.
        """
        def on_change(docs: list[Document]) -> None:
            transactions = map_documents(docs, document_to_transaction)
            callback(filter_by_range(transactions, start, end))

        return await self._store.subscribe(
            user_collection(user_id, TRANSACTIONS), "date", on_change, descending=True
        )
