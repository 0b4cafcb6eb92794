"""Room comparison persistence (houseInspections/{id}/roomComparisons)."""

import logging
from typing import Optional

from roomcheck.models.collections import room_comparisons_path
from roomcheck.models.documents import ComparisonEvent, RoomComparisonDocument, RoomDocument
from roomcheck.services.document_store import DocumentStoreInterface

logger = logging.getLogger(__name__)


class RoomComparisonStore:
    """Append-only log of comparison events per room per inspection."""

    def __init__(self, store: DocumentStoreInterface):
        self.store = store

    async def get(self, inspection_id: str, room_id: str) -> Optional[RoomComparisonDocument]:
        data = await self.store.get(room_comparisons_path(inspection_id), room_id)
        return RoomComparisonDocument.from_store(data) if data else None

    async def list(self, inspection_id: str) -> list[RoomComparisonDocument]:
        docs = await self.store.query(room_comparisons_path(inspection_id))
        return [RoomComparisonDocument.from_store(d) for d in docs]

    async def append_event(self, inspection_id: str, room: RoomDocument, event: ComparisonEvent) -> None:
        """Create the room's document on first write, append to it afterwards."""
        await self.store.merge(
            room_comparisons_path(inspection_id),
            room.id,
            {"roomName": room.name, "referenceImageUrls": list(room.reference_images)},
            array_union={"comparisonEvents": [event.to_store()]},
        )
        logger.info(f"[COMPARISONS] Appended event for room {room.id} in inspection {inspection_id}")
