"""Home management service."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from roomcheck.core.exceptions import InvalidInput, NotFound
from roomcheck.models.collections import COLLECTION_HOMES
from roomcheck.models.documents import HomeDocument
from roomcheck.services.document_store import DocumentStoreInterface, Unsubscribe

logger = logging.getLogger(__name__)


def order_by_creation(docs: list) -> list:
    """Ascending by creation time, ties broken by document id."""
    return sorted(docs, key=lambda d: (d.created_at, d.id or ""))


def resolve_selected_home(homes: list[HomeDocument], requested_id: Optional[str]) -> Optional[str]:
    """Keep the requested home if the owner still has it, else fall back to the first."""
    if requested_id and any(h.id == requested_id for h in homes):
        return requested_id
    return homes[0].id if homes else None


@dataclass
class HomeContext:
    """The owner's homes and which one is selected, built per request."""

    homes: list[HomeDocument]
    selected_home_id: Optional[str]

    @property
    def selected_home(self) -> Optional[HomeDocument]:
        return next((h for h in self.homes if h.id == self.selected_home_id), None)


class HomeService:
    def __init__(self, store: DocumentStoreInterface):
        self.store = store

    async def create_home(self, user_id: str, name: str, address: Optional[str] = None) -> HomeDocument:
        name = (name or "").strip()
        if not name:
            raise InvalidInput("Home name cannot be empty.")

        home = HomeDocument(
            name=name,
            address=(address or "").strip(),
            user_id=user_id,
            created_at=datetime.now(timezone.utc),
        )
        home.id = await self.store.add(COLLECTION_HOMES, home.to_store())
        logger.info(f"[HOMES] Created home {home.id} for {user_id}")
        return home

    async def list_homes(self, user_id: str) -> list[HomeDocument]:
        docs = await self.store.query(COLLECTION_HOMES, [("userId", user_id)])
        return order_by_creation([HomeDocument.from_store(d) for d in docs])

    async def load_context(self, user_id: str, selected_home_id: Optional[str] = None) -> HomeContext:
        homes = await self.list_homes(user_id)
        return HomeContext(homes=homes, selected_home_id=resolve_selected_home(homes, selected_home_id))

    async def get_home(self, user_id: str, home_id: str) -> HomeDocument:
        """Owner-scoped fetch. Other owners' homes look exactly like missing ones."""
        data = await self.store.get(COLLECTION_HOMES, home_id)
        if not data or data.get("userId") != user_id:
            raise NotFound("Home not found")
        return HomeDocument.from_store(data)

    async def delete_home(self, user_id: str, home_id: str) -> None:
        home = await self.get_home(user_id, home_id)
        # TODO: cascade delete of rooms and inspections before enabling this
        logger.warning(f"[HOMES] Delete requested for home {home.id} by {user_id}; not implemented")

    def subscribe_homes(
        self,
        user_id: str,
        on_change: Callable[[list[HomeDocument]], None],
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> Unsubscribe:
        return self.store.subscribe(
            COLLECTION_HOMES,
            [("userId", user_id)],
            lambda docs: on_change(order_by_creation([HomeDocument.from_store(d) for d in docs])),
            on_error,
        )
