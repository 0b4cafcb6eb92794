"""Document store service with provider interface (Firestore)."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence

from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from roomcheck.core.exceptions import NotFound, PersistFailed, StoreUnavailable

logger = logging.getLogger(__name__)

Document = dict[str, Any]
Filters = Sequence[tuple[str, Any]]
Unsubscribe = Callable[[], None]


class DocumentStoreInterface(ABC):
    """Generic operations against named collections.

    Collection arguments are slash-separated paths, so sub-collections are
    addressed as ``"houseInspections/{id}/roomComparisons"``. Every returned
    document dict carries its store-assigned ``id``. Failed reads raise
    StoreUnavailable; failed writes raise PersistFailed.
    """

    @abstractmethod
    async def add(self, collection: str, data: Document) -> str:
        """Create a document with a store-assigned id and return the id."""

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Fetch one document, or None if it does not exist."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Filters = (),
        order_by: Optional[str] = None,
    ) -> list[Document]:
        """Equality-filtered query, optionally ordered ascending by a field."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, data: Document) -> None:
        """Update fields of an existing document. Raises NotFound if absent."""

    @abstractmethod
    async def update_if(
        self,
        collection: str,
        doc_id: str,
        data: Document,
        expected: dict[str, Any],
    ) -> bool:
        """Atomically update a document only while its fields equal ``expected``.

        Returns False, writing nothing, when a precondition no longer holds.
        Raises NotFound if the document is absent.
        """

    @abstractmethod
    async def merge(
        self,
        collection: str,
        doc_id: str,
        data: Document,
        array_union: Optional[dict[str, list]] = None,
    ) -> None:
        """Set-with-merge, creating the document on first write.

        Fields named in ``array_union`` are appended to atomically; existing
        elements are kept in place.
        """

    @abstractmethod
    def subscribe(
        self,
        collection: str,
        filters: Filters,
        on_change: Callable[[list[Document]], None],
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> Unsubscribe:
        """Push the full result set to ``on_change`` whenever it changes.

        Returns the callable that cancels the subscription; the caller owns it.
        """


def _to_document(snapshot) -> Document:
    return {"id": snapshot.id, **(snapshot.to_dict() or {})}


class FirestoreDocumentStore(DocumentStoreInterface):
    """Cloud Firestore provider.

    Reads and writes go through the async client. Live subscriptions need the
    sync client, whose watch streams deliver snapshots on a background thread.
    """

    def __init__(self, client: firestore.AsyncClient, watch_client: Optional[firestore.Client] = None):
        self.client = client
        self.watch_client = watch_client

    @staticmethod
    def _apply(query, filters: Filters, order_by: Optional[str] = None):
        for field, value in filters:
            query = query.where(filter=FieldFilter(field, "==", value))
        if order_by:
            query = query.order_by(order_by)
        return query

    async def add(self, collection: str, data: Document) -> str:
        try:
            _, ref = await self.client.collection(collection).add(data)
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"[STORE] Create in {collection} failed: {e}")
            raise PersistFailed(f"Failed to save to {collection}: {e.message}") from e
        logger.info(f"[STORE] Created {collection}/{ref.id}")
        return ref.id

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        try:
            snapshot = await self.client.collection(collection).document(doc_id).get()
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"[STORE] Read of {collection}/{doc_id} failed: {e}")
            raise StoreUnavailable(f"Failed to read {collection}: {e.message}") from e
        if not snapshot.exists:
            return None
        return _to_document(snapshot)

    async def query(
        self,
        collection: str,
        filters: Filters = (),
        order_by: Optional[str] = None,
    ) -> list[Document]:
        query = self._apply(self.client.collection(collection), filters, order_by)
        try:
            return [_to_document(snapshot) async for snapshot in query.stream()]
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"[STORE] Query on {collection} failed: {e}")
            raise StoreUnavailable(f"Failed to read {collection}: {e.message}") from e

    async def update(self, collection: str, doc_id: str, data: Document) -> None:
        try:
            await self.client.collection(collection).document(doc_id).update(data)
        except google_exceptions.NotFound as e:
            raise NotFound(f"{collection}/{doc_id} not found") from e
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"[STORE] Update of {collection}/{doc_id} failed: {e}")
            raise PersistFailed(f"Failed to update {collection}: {e.message}") from e

    async def update_if(
        self,
        collection: str,
        doc_id: str,
        data: Document,
        expected: dict[str, Any],
    ) -> bool:
        ref = self.client.collection(collection).document(doc_id)

        @firestore.async_transactional
        async def _update(transaction) -> bool:
            snapshot = await ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFound(f"{collection}/{doc_id} not found")
            current = snapshot.to_dict() or {}
            if any(current.get(field) != value for field, value in expected.items()):
                return False
            transaction.update(ref, data)
            return True

        try:
            updated = await _update(self.client.transaction())
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"[STORE] Conditional update of {collection}/{doc_id} failed: {e}")
            raise PersistFailed(f"Failed to update {collection}: {e.message}") from e
        if not updated:
            logger.info(f"[STORE] Skipped update of {collection}/{doc_id}: {expected} no longer holds")
        return updated

    async def merge(
        self,
        collection: str,
        doc_id: str,
        data: Document,
        array_union: Optional[dict[str, list]] = None,
    ) -> None:
        payload = dict(data)
        for field, values in (array_union or {}).items():
            payload[field] = firestore.ArrayUnion(values)

        try:
            await self.client.collection(collection).document(doc_id).set(payload, merge=True)
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"[STORE] Merge into {collection}/{doc_id} failed: {e}")
            raise PersistFailed(f"Failed to save to {collection}: {e.message}") from e

    def subscribe(
        self,
        collection: str,
        filters: Filters,
        on_change: Callable[[list[Document]], None],
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> Unsubscribe:
        if self.watch_client is None:
            raise RuntimeError("Live subscriptions need a sync Firestore client")

        query = self._apply(self.watch_client.collection(collection), filters)

        def _callback(snapshots, changes, read_time):
            try:
                on_change([_to_document(s) for s in snapshots])
            except Exception as e:
                logger.error(f"[STORE] Subscriber on {collection} failed: {e}")
                if on_error:
                    on_error(e)

        watch = query.on_snapshot(_callback)
        logger.info(f"[STORE] Subscribed to {collection} {list(filters)}")
        return watch.unsubscribe


# Singleton instance
_document_store: Optional[DocumentStoreInterface] = None


def get_document_store() -> DocumentStoreInterface:
    """Get the process-wide Firestore document store."""
    global _document_store
    if _document_store is None:
        from firebase_admin import firestore as admin_firestore
        from firebase_admin import firestore_async

        from roomcheck.core.firebase import get_firebase_app

        app = get_firebase_app()
        _document_store = FirestoreDocumentStore(
            client=firestore_async.client(app),
            watch_client=admin_firestore.client(app),
        )
    return _document_store
