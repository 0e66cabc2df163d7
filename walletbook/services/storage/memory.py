"""
In-Memory Document Store

Used for development and tests. It behaves like the hosted store in the
ways the rest of the system depends on:
- IDs and timestamps are assigned by the store
- Writes are single-document; only create_many is all-or-nothing
- Every collection has its own publish/subscribe channel that pushes
  the full ordered document list after each write

Subscribers are called synchronously right after the write that changed
their collection, before the writing coroutine resumes. A subscriber that
raises is logged and skipped; the write it was notified about stands.
"""

import copy
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import uuid4

import structlog

from walletbook.services.storage.interface import (
    SERVER_TIMESTAMP,
    Document,
    DocumentStoreInterface,
    NotFoundError,
    SnapshotCallback,
    StorageError,
    Subscription,
)


logger = structlog.get_logger("walletbook.storage.memory")


def _split_doc_path(doc_path: str) -> tuple[str, str]:
    parts = doc_path.strip("/").split("/")
    if len(parts) < 2 or len(parts) % 2 != 0:
        raise StorageError(f"Not a document path: {doc_path}")
    return "/".join(parts[:-1]), parts[-1]


def _check_collection_path(collection_path: str) -> str:
    path = collection_path.strip("/")
    if not path or len(path.split("/")) % 2 != 1:
        raise StorageError(f"Not a collection path: {collection_path}")
    return path


def _sort_key(order_by: str) -> Callable[[Document], tuple]:
    # Documents missing the field sort first, like the hosted store
    # treats them as absent from ordered queries.
    def key(doc: Document) -> tuple:
        value = doc.get(order_by)
        if value is None:
            return (0, "")
        if isinstance(value, datetime):
            # Naive datetimes are local time; compare everything in UTC
            return (1, value.astimezone(timezone.utc))
        return (1, value)
    return key


class _Channel:
    """Subscribers of one collection."""

    def __init__(self):
        self.listeners: list[tuple[str, bool, SnapshotCallback, Subscription]] = []


class InMemoryDocumentStore(DocumentStoreInterface):
    """
    Dict-backed implementation of the document store.

    `clock` can be replaced to make server timestamps deterministic.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._collections: dict[str, dict[str, Document]] = {}
        self._channels: dict[str, _Channel] = {}
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _resolve(self, data: Document) -> Document:
        now = self._clock()
        resolved = {}
        for key, value in data.items():
            if key == "id":
                continue
            resolved[key] = now if value is SERVER_TIMESTAMP else copy.deepcopy(value)
        return resolved

    def _ordered(self, collection_path: str, order_by: str, descending: bool) -> list[Document]:
        docs = [
            {"id": doc_id, **copy.deepcopy(data)}
            for doc_id, data in self._collections.get(collection_path, {}).items()
        ]
        docs.sort(key=_sort_key(order_by), reverse=descending)
        return docs

    def _publish(self, collection_path: str) -> None:
        channel = self._channels.get(collection_path)
        if channel is None:
            return
        for order_by, descending, callback, subscription in list(channel.listeners):
            if not subscription.active:
                continue
            try:
                callback(self._ordered(collection_path, order_by, descending))
            except Exception as e:
                logger.error(
                    "subscriber_callback_failed",
                    collection=collection_path,
                    error=str(e),
                )

    # ------------------------------------------------------------------
    # DocumentStoreInterface
    # ------------------------------------------------------------------

    async def create(self, collection_path: str, data: Document) -> str:
        path = _check_collection_path(collection_path)
        doc_id = uuid4().hex[:20]
        self._collections.setdefault(path, {})[doc_id] = self._resolve(data)
        self._publish(path)
        return doc_id

    async def create_many(self, collection_path: str, documents: list[Document]) -> list[str]:
        path = _check_collection_path(collection_path)
        resolved = [self._resolve(doc) for doc in documents]
        ids = [uuid4().hex[:20] for _ in resolved]
        collection = self._collections.setdefault(path, {})
        for doc_id, data in zip(ids, resolved):
            collection[doc_id] = data
        self._publish(path)
        return ids

    async def update(self, doc_path: str, data: Document) -> None:
        collection_path, doc_id = _split_doc_path(doc_path)
        collection = self._collections.get(collection_path, {})
        if doc_id not in collection:
            raise NotFoundError(f"Document not found: {doc_path}")
        collection[doc_id].update(self._resolve(data))
        self._publish(collection_path)

    async def delete(self, doc_path: str) -> None:
        collection_path, doc_id = _split_doc_path(doc_path)
        collection = self._collections.get(collection_path, {})
        if collection.pop(doc_id, None) is not None:
            self._publish(collection_path)

    async def get(self, doc_path: str) -> Optional[Document]:
        collection_path, doc_id = _split_doc_path(doc_path)
        data = self._collections.get(collection_path, {}).get(doc_id)
        if data is None:
            return None
        return {"id": doc_id, **copy.deepcopy(data)}

    async def list(
        self,
        collection_path: str,
        order_by: str,
        descending: bool = False,
    ) -> list[Document]:
        path = _check_collection_path(collection_path)
        return self._ordered(path, order_by, descending)

    async def subscribe(
        self,
        collection_path: str,
        order_by: str,
        callback: SnapshotCallback,
        descending: bool = False,
    ) -> Subscription:
        path = _check_collection_path(collection_path)
        channel = self._channels.setdefault(path, _Channel())

        def remove() -> None:
            channel.listeners[:] = [
                entry for entry in channel.listeners if entry[3] is not subscription
            ]

        subscription = Subscription(on_cancel=remove)
        channel.listeners.append((order_by, descending, callback, subscription))
        callback(self._ordered(path, order_by, descending))
        return subscription

    def subscriber_count(self, collection_path: str) -> int:
        """Number of live subscriptions on a collection."""
        channel = self._channels.get(collection_path.strip("/"))
        return len(channel.listeners) if channel else 0
