"""
Storage Services Package

Provides the abstract document store interface and its implementations.
Cloud Firestore is the production backend; the in-memory store backs
tests and local development.

The Firestore module is not imported here so that the in-memory store
can be used without the Google client libraries being configured.
"""

from walletbook.services.storage.interface import (
    SERVER_TIMESTAMP,
    ConnectionError,
    Document,
    DocumentStoreInterface,
    NotFoundError,
    StorageError,
    Subscription,
    user_collection,
    user_document,
)
from walletbook.services.storage.memory import InMemoryDocumentStore

__all__ = [
    # Interface
    "DocumentStoreInterface",
    "Document",
    "SERVER_TIMESTAMP",
    "Subscription",
    "user_collection",
    "user_document",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryDocumentStore",
]
