# backend/tests/conftest.py
import copy
import itertools
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import pytest

from roomcheck.core.config import Settings
from roomcheck.core.exceptions import NotFound
from roomcheck.models.collections import (
    COLLECTION_HOMES,
    COLLECTION_INSPECTIONS,
    COLLECTION_ROOMS,
)
from roomcheck.services.document_store import DocumentStoreInterface
from roomcheck.services.uploads import ImageFile

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

OWNER = "owner-1"


class InMemoryDocumentStore(DocumentStoreInterface):
    """Dict-backed store with the same semantics the services rely on."""

    def __init__(self):
        self.collections: dict[str, dict[str, dict]] = defaultdict(dict)
        self.subscribers: list[tuple] = []
        self.writes: list[tuple[str, str]] = []
        self._ids = itertools.count(1)

    def put(self, collection: str, doc_id: str, data: dict) -> str:
        """Seed a document with a chosen id."""
        self.collections[collection][doc_id] = copy.deepcopy(data)
        return doc_id

    def raw(self, collection: str, doc_id: str) -> Optional[dict]:
        return self.collections[collection].get(doc_id)

    def _matching(self, collection, filters, order_by=None) -> list[dict]:
        docs = [
            {"id": doc_id, **copy.deepcopy(data)}
            for doc_id, data in self.collections[collection].items()
            if all(data.get(field) == value for field, value in filters)
        ]
        if order_by:
            docs.sort(key=lambda d: d[order_by])
        return docs

    def _notify(self, collection: str) -> None:
        for sub_collection, filters, on_change in list(self.subscribers):
            if sub_collection == collection:
                on_change(self._matching(collection, filters))

    async def add(self, collection, data):
        doc_id = f"{collection.split('/')[-1]}-{next(self._ids)}"
        self.collections[collection][doc_id] = copy.deepcopy(data)
        self.writes.append(("add", collection))
        self._notify(collection)
        return doc_id

    async def get(self, collection, doc_id):
        data = self.collections[collection].get(doc_id)
        return {"id": doc_id, **copy.deepcopy(data)} if data is not None else None

    async def query(self, collection, filters=(), order_by=None):
        return self._matching(collection, filters, order_by)

    async def update(self, collection, doc_id, data):
        if doc_id not in self.collections[collection]:
            raise NotFound(f"{collection}/{doc_id} not found")
        self.collections[collection][doc_id].update(copy.deepcopy(data))
        self.writes.append(("update", collection))
        self._notify(collection)

    async def update_if(self, collection, doc_id, data, expected):
        current = self.collections[collection].get(doc_id)
        if current is None:
            raise NotFound(f"{collection}/{doc_id} not found")
        if any(current.get(field) != value for field, value in expected.items()):
            return False
        await self.update(collection, doc_id, data)
        return True

    async def merge(self, collection, doc_id, data, array_union=None):
        doc = self.collections[collection].setdefault(doc_id, {})
        doc.update(copy.deepcopy(data))
        for field, values in (array_union or {}).items():
            existing = doc.setdefault(field, [])
            existing.extend(v for v in copy.deepcopy(values) if v not in existing)
        self.writes.append(("merge", collection))
        self._notify(collection)

    def subscribe(self, collection, filters, on_change, on_error=None):
        subscription = (collection, list(filters), on_change)
        self.subscribers.append(subscription)
        on_change(self._matching(collection, filters))

        def unsubscribe():
            if subscription in self.subscribers:
                self.subscribers.remove(subscription)

        return unsubscribe


class FakeUploader:
    """Returns ``https://cdn/<filename>`` for each file, in order."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.calls: list[list[str]] = []

    async def upload_many(self, files):
        self.calls.append([f.filename for f in files])
        if self.error:
            raise self.error
        return [f"https://cdn/{f.filename}" for f in files]


class FakeVision:
    def __init__(
        self,
        result: str = "Missing: kettle on counter.",
        inventory: str = "Furniture: table",
        error: Optional[Exception] = None,
    ):
        self.result = result
        self.inventory = inventory
        self.error = error
        self.compare_calls: list[tuple[list[str], list[str]]] = []
        self.inventory_calls: list[list[str]] = []

    async def compare(self, reference_urls, comparison_urls):
        self.compare_calls.append((list(reference_urls), list(comparison_urls)))
        if self.error:
            raise self.error
        return self.result

    async def describe_inventory(self, image_urls):
        self.inventory_calls.append(list(image_urls))
        if self.error:
            raise self.error
        return self.inventory


class FakeReportService:
    def __init__(self):
        self.reports: list[str] = []
        self.emails: list[dict[str, str]] = []

    async def start_report(self, inspection_id):
        self.reports.append(inspection_id)

    async def send_email(self, email, subject, email_content):
        self.emails.append({"email": email, "subject": subject, "emailContent": email_content})


def image(name: str = "c.jpg", content_type: str = "image/jpeg", size: int = 16) -> ImageFile:
    return ImageFile(filename=name, content=b"\xff" * size, content_type=content_type)


def fixed_clock(start: datetime = T0, step: timedelta = timedelta(minutes=1)) -> Callable[[], datetime]:
    """Clock returning start, start+step, ... on successive calls."""
    counter = itertools.count()
    return lambda: start + step * next(counter)


# -------- Fixtures --------
@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def vision():
    return FakeVision()


@pytest.fixture
def report_service():
    return FakeReportService()


@pytest.fixture
def settings():
    return Settings(
        public_app_url="https://rooms.example.com/",
        allowed_origins="https://rooms.example.com",
        max_upload_size_mb=1,
    )


@pytest.fixture
def flat_2b(store) -> dict[str, Any]:
    """Home "Flat 2B" with Kitchen then Bathroom and an active inspection."""
    store.put(COLLECTION_HOMES, "home-1", {
        "name": "Flat 2B",
        "address": "2 High Street",
        "userId": OWNER,
        "createdAt": T0,
    })
    store.put(COLLECTION_ROOMS, "room-kitchen", {
        "homeId": "home-1",
        "name": "Kitchen",
        "referenceImages": ["a.jpg", "b.jpg"],
        "initialItemList": "Appliances: kettle",
        "userId": OWNER,
        "createdAt": T0,
    })
    store.put(COLLECTION_ROOMS, "room-bathroom", {
        "homeId": "home-1",
        "name": "Bathroom",
        "referenceImages": ["bath.jpg"],
        "userId": OWNER,
        "createdAt": T0 + timedelta(hours=1),
    })
    store.put(COLLECTION_INSPECTIONS, "insp-1", {
        "homeId": "home-1",
        "ownerUserId": OWNER,
        "status": "active",
        "createdAt": T0,
    })
    return {"home_id": "home-1", "inspection_id": "insp-1", "kitchen": "room-kitchen", "bathroom": "room-bathroom"}
