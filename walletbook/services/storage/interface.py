"""
Abstract Document Store Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap Cloud Firestore for another document database later
2. Use in-memory storage for testing
3. Keep ledger and report logic decoupled from the storage backend

The interface mirrors what a hosted document database gives us:
collections of schemaless documents, single-document writes, and
live queries that push the whole ordered result on every change.
There are NO multi-document transactions here. Anything built on top
must live with that.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional


Document = dict[str, Any]
SnapshotCallback = Callable[[list[Document]], None]


class _ServerTimestamp:
    """Sentinel replaced by the store's own clock when a document is written."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


def user_collection(user_id: str, name: str, root: str = "users") -> str:
    """Path of one of a user's collections, e.g. users/{uid}/wallets."""
    return f"{root}/{user_id}/{name}"


def user_document(user_id: str, name: str, doc_id: str, root: str = "users") -> str:
    """Path of a single document inside one of a user's collections."""
    return f"{user_collection(user_id, name, root)}/{doc_id}"


class Subscription:
    """
    Handle for a live query.

    Calling cancel() guarantees the callback is not invoked again.
    Cancelling twice is harmless.
    """

    def __init__(self, on_cancel: Optional[Callable[[], None]] = None):
        self._on_cancel = on_cancel
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        if self._on_cancel is not None:
            self._on_cancel()


class DocumentStoreInterface(ABC):
    """
    Abstract interface for document store operations.

    Paths are slash-separated: collection paths have an odd number of
    segments (users/u1/wallets), document paths an even number
    (users/u1/wallets/w1).

    Documents returned by get/list/subscribe include their ID under "id".
    """

    @abstractmethod
    async def create(self, collection_path: str, data: Document) -> str:
        """
        Create a document with a store-assigned ID.

        Args:
            collection_path: Collection to add the document to
            data: Document fields; SERVER_TIMESTAMP values are resolved by the store

        Returns:
            The new document's ID

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def create_many(self, collection_path: str, documents: list[Document]) -> list[str]:
        """
        Create several documents in one batched write.

        Either all documents are written or none are.

        Returns:
            The new document IDs, in input order
        """
        pass

    @abstractmethod
    async def update(self, doc_path: str, data: Document) -> None:
        """
        Merge fields into an existing document.

        Raises:
            NotFoundError: If the document doesn't exist
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete(self, doc_path: str) -> None:
        """
        Delete a document. Deleting a missing document is not an error.
        """
        pass

    @abstractmethod
    async def get(self, doc_path: str) -> Optional[Document]:
        """
        Read a single document.

        Returns:
            The document if found, None otherwise
        """
        pass

    @abstractmethod
    async def list(
        self,
        collection_path: str,
        order_by: str,
        descending: bool = False,
    ) -> list[Document]:
        """
        Read a whole collection once, ordered by a field.
        """
        pass

    @abstractmethod
    async def subscribe(
        self,
        collection_path: str,
        order_by: str,
        callback: SnapshotCallback,
        descending: bool = False,
    ) -> Subscription:
        """
        Start a live query on a collection.

        The callback receives the full ordered document list once with the
        current contents, then again after every change to the collection.

        Returns:
            A Subscription whose cancel() stops delivery
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
