"""
Cloud Firestore Storage Implementation

DESIGN DECISION: Firestore is the production backend because:
1. Per-user data nests naturally as users/{uid}/<collection>
2. Live queries (on_snapshot) push changes without polling
3. Server-assigned timestamps give a consistent creation order
4. No schema migrations for a small personal dataset

TRADEOFFS:
- We do not use Firestore transactions; the ledger performs plain
  read-then-write sequences (see walletbook.ledger)
- Snapshot listeners run on a background thread; callbacks are handed
  back to the event loop that created the subscription

The implementation follows the abstract interface, so tests and local
development run on the in-memory store without changing any caller.
"""

import asyncio
from typing import Optional

from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from walletbook.config import get_settings
from walletbook.services.storage.interface import (
    SERVER_TIMESTAMP,
    ConnectionError,
    Document,
    DocumentStoreInterface,
    NotFoundError,
    SnapshotCallback,
    StorageError,
    Subscription,
)


SCOPES = [
    "https://www.googleapis.com/auth/datastore",
    "https://www.googleapis.com/auth/cloud-platform",
]


class FirestoreClient:
    """
    Low-level Firestore client wrapper.

    Handles authentication and provides retry logic for connecting.
    """

    def __init__(self):
        self._client: Optional[firestore.Client] = None
        self._settings = get_settings().firestore

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> firestore.Client:
        """
        Establish connection to Firestore.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=SCOPES,
                )
                self._client = firestore.Client(
                    project=self._settings.project_id,
                    credentials=credentials,
                )
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Firestore: {e}")

        return self._client


def _to_firestore(data: Document) -> Document:
    """Translate our sentinel values into Firestore's."""
    return {
        key: firestore.SERVER_TIMESTAMP if value is SERVER_TIMESTAMP else value
        for key, value in data.items()
        if key != "id"
    }


def _from_snapshot(snapshot) -> Document:
    return {"id": snapshot.id, **(snapshot.to_dict() or {})}


class FirestoreDocumentStore(DocumentStoreInterface):
    """
    Firestore implementation of the document store.

    The google-cloud-firestore client is synchronous; calls are pushed
    to a worker thread so the event loop keeps running during round-trips.
    """

    def __init__(self, client: Optional[FirestoreClient] = None):
        self._client = client or FirestoreClient()

    def _db(self) -> firestore.Client:
        return self._client.connect()

    def _query(self, collection_path: str, order_by: str, descending: bool):
        direction = (
            firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
        )
        return self._db().collection(collection_path).order_by(order_by, direction=direction)

    async def create(self, collection_path: str, data: Document) -> str:
        """Add a document and return its generated ID."""
        try:
            collection = self._db().collection(collection_path)
            _, doc_ref = await asyncio.to_thread(collection.add, _to_firestore(data))
            return doc_ref.id
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to create document in {collection_path}: {e}")

    async def create_many(self, collection_path: str, documents: list[Document]) -> list[str]:
        """Write several documents in one batch commit."""
        try:
            db = self._db()
            collection = db.collection(collection_path)
            batch = db.batch()
            ids = []
            for data in documents:
                doc_ref = collection.document()
                batch.set(doc_ref, _to_firestore(data))
                ids.append(doc_ref.id)
            await asyncio.to_thread(batch.commit)
            return ids
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to batch-create documents in {collection_path}: {e}")

    async def update(self, doc_path: str, data: Document) -> None:
        """Merge fields into an existing document."""
        try:
            doc_ref = self._db().document(doc_path)
            await asyncio.to_thread(doc_ref.update, _to_firestore(data))
        except google_exceptions.NotFound:
            raise NotFoundError(f"Document not found: {doc_path}")
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update document {doc_path}: {e}")

    async def delete(self, doc_path: str) -> None:
        """Delete a document."""
        try:
            doc_ref = self._db().document(doc_path)
            await asyncio.to_thread(doc_ref.delete)
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete document {doc_path}: {e}")

    async def get(self, doc_path: str) -> Optional[Document]:
        """Read a single document."""
        try:
            doc_ref = self._db().document(doc_path)
            snapshot = await asyncio.to_thread(doc_ref.get)
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to get document {doc_path}: {e}")

        if not snapshot.exists:
            return None
        return _from_snapshot(snapshot)

    async def list(
        self,
        collection_path: str,
        order_by: str,
        descending: bool = False,
    ) -> list[Document]:
        """Read a collection once, ordered by a field."""
        try:
            query = self._query(collection_path, order_by, descending)
            snapshots = await asyncio.to_thread(lambda: list(query.stream()))
            return [_from_snapshot(snapshot) for snapshot in snapshots]
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list {collection_path}: {e}")

    async def subscribe(
        self,
        collection_path: str,
        order_by: str,
        callback: SnapshotCallback,
        descending: bool = False,
    ) -> Subscription:
        """
        Attach an on_snapshot listener.

        Firestore calls the listener from its watch thread. Each snapshot
        is re-scheduled onto the subscribing loop, and dropped there if
        the subscription was cancelled in the meantime.
        """
        loop = asyncio.get_running_loop()
        subscription: Optional[Subscription] = None

        def deliver(docs: list[Document]) -> None:
            if subscription is not None and subscription.active:
                callback(docs)

        def on_snapshot(snapshots, changes, read_time) -> None:
            docs = [_from_snapshot(snapshot) for snapshot in snapshots]
            loop.call_soon_threadsafe(deliver, docs)

        try:
            query = self._query(collection_path, order_by, descending)
            watch = query.on_snapshot(on_snapshot)
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to subscribe to {collection_path}: {e}")

        subscription = Subscription(on_cancel=watch.unsubscribe)
        return subscription
