"""Services package."""

from walletbook.services.storage import (
    ConnectionError,
    DocumentStoreInterface,
    InMemoryDocumentStore,
    NotFoundError,
    StorageError,
    Subscription,
)

__all__ = [
    # Storage services
    "ConnectionError",
    "DocumentStoreInterface",
    "InMemoryDocumentStore",
    "NotFoundError",
    "StorageError",
    "Subscription",
]
