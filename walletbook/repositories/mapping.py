"""
Document <-> model mapping.

Stored documents use the web client's field names (camelCase:
categoryId, walletId, createdAt) so existing user data stays
readable. Models use snake_case.
"""

from enum import Enum
from typing import Optional

from pydantic import ValidationError

from walletbook.models.finance import (
    Category,
    CategoryInput,
    Transaction,
    TransactionInput,
    TransactionPatch,
    Wallet,
    WalletInput,
    WalletUpdate,
)
from walletbook.services.storage import SERVER_TIMESTAMP, Document


TRANSACTION_FIELDS = {
    "type": "type",
    "amount": "amount",
    "category_id": "categoryId",
    "wallet_id": "walletId",
    "date": "date",
    "note": "note",
}


def _without_none(data: Document) -> Document:
    return {key: value for key, value in data.items() if value is not None}


# Wallets

def wallet_to_document(wallet: WalletInput) -> Document:
    return _without_none({
        "name": wallet.name,
        "type": wallet.type.value,
        "icon": wallet.icon,
        "balance": wallet.balance or 0,
        "color": wallet.color,
        "createdAt": SERVER_TIMESTAMP,
    })


def wallet_update_to_document(update: WalletUpdate) -> Document:
    data = update.model_dump(exclude_none=True, mode="json")
    return data


def document_to_wallet(doc: Document) -> Wallet:
    return Wallet(
        id=doc["id"],
        name=doc.get("name", ""),
        type=doc.get("type") or "cash",
        icon=doc.get("icon") or "💵",
        balance=doc.get("balance") or 0,
        color=doc.get("color"),
        created_at=doc.get("createdAt"),
    )


# Categories

def category_to_document(category: CategoryInput) -> Document:
    return _without_none({
        "name": category.name,
        "type": category.type.value,
        "icon": category.icon,
        "color": category.color,
        "createdAt": SERVER_TIMESTAMP,
    })


def document_to_category(doc: Document) -> Category:
    return Category(
        id=doc["id"],
        name=doc.get("name", ""),
        icon=doc.get("icon", ""),
        type=doc["type"],
        color=doc.get("color"),
        created_at=doc.get("createdAt"),
    )


# Transactions

def transaction_to_document(tx: TransactionInput) -> Document:
    return _without_none({
        "type": tx.type.value,
        "amount": tx.amount,
        "categoryId": tx.category_id,
        "walletId": tx.wallet_id,
        "date": tx.date,
        "note": tx.note,
        "createdAt": SERVER_TIMESTAMP,
    })


def transaction_patch_to_document(patch: TransactionPatch) -> Document:
    data = {}
    for field, value in patch.model_dump(exclude_none=True).items():
        if isinstance(value, Enum):
            value = value.value
        data[TRANSACTION_FIELDS[field]] = value
    return data


def document_to_transaction(doc: Document) -> Transaction:
    return Transaction(
        id=doc["id"],
        type=doc["type"],
        amount=doc["amount"],
        category_id=doc.get("categoryId", ""),
        wallet_id=doc.get("walletId", ""),
        date=doc["date"],
        note=doc.get("note") or None,
        created_at=doc.get("createdAt"),
    )


def map_documents(docs: list[Document], mapper) -> list:
    """Map a document list, skipping documents that don't fit the model."""
    items = []
    for doc in docs:
        try:
            items.append(mapper(doc))
        except (KeyError, ValidationError):
            continue  # Skip malformed documents
    return items


def map_optional(doc: Optional[Document], mapper):
    return mapper(doc) if doc is not None else None
