"""Room management service.

Room creation is strict: images are uploaded, the AI inventory analysis runs on
the uploaded URLs, and the Room document is written only once the analysis has
succeeded. Any failure before that leaves no Room behind.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from roomcheck.core.exceptions import InvalidInput, InvalidState, NoReferenceImages, NotFound
from roomcheck.models.collections import COLLECTION_ROOMS
from roomcheck.models.documents import RoomDocument
from roomcheck.services.document_store import DocumentStoreInterface, Unsubscribe
from roomcheck.services.homes import HomeService, order_by_creation
from roomcheck.services.uploads import CloudinaryUploader, ImageFile, validate_image_files
from roomcheck.services.vision import VisionComparisonClient

logger = logging.getLogger(__name__)


@dataclass
class RoomDraft:
    """Transient input of the room form."""

    home_id: Optional[str] = None
    name: str = ""
    files: list[ImageFile] = field(default_factory=list)
    reference_images: list[str] = field(default_factory=list)
    initial_item_list: Optional[str] = None

    @property
    def is_analyzed(self) -> bool:
        return bool(self.reference_images) and self.initial_item_list is not None

    def reset(self, keep_item_list: bool = False) -> None:
        """Clear the form. The owning home stays selected.

        ``keep_item_list`` keeps a previously computed AI inventory on screen.
        """
        self.name = ""
        self.files = []
        self.reference_images = []
        if not keep_item_list:
            self.initial_item_list = None


@dataclass
class AdHocComparison:
    room: RoomDocument
    uploaded_image_urls: list[str]
    ai_comparison_result: str


class RoomService:
    def __init__(
        self,
        store: DocumentStoreInterface,
        uploader: Optional[CloudinaryUploader] = None,
        vision: Optional[VisionComparisonClient] = None,
        max_upload_size_mb: Optional[int] = None,
    ):
        self.store = store
        self.uploader = uploader
        self.vision = vision
        self.max_upload_size_mb = max_upload_size_mb
        self.homes = HomeService(store)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def analyze_draft(self, user_id: str, draft: RoomDraft) -> str:
        """Upload the draft's images and compute its initial item inventory."""
        if not draft.home_id:
            raise InvalidInput("Please select a home first.")
        if not draft.name.strip():
            raise InvalidInput("Please enter a room name.")
        validate_image_files(draft.files, self.max_upload_size_mb)
        await self.homes.get_home(user_id, draft.home_id)

        urls = await self.uploader.upload_many(draft.files)
        item_list = await self.vision.describe_inventory(urls)

        draft.reference_images = urls
        draft.initial_item_list = item_list
        return item_list

    async def save_draft(self, user_id: str, draft: RoomDraft) -> RoomDocument:
        if not draft.is_analyzed:
            raise InvalidState("Room images must be analyzed before saving.")

        room = RoomDocument(
            home_id=draft.home_id,
            name=draft.name.strip(),
            reference_images=list(draft.reference_images),
            initial_item_list=draft.initial_item_list,
            user_id=user_id,
            created_at=datetime.now(timezone.utc),
        )
        room.id = await self.store.add(COLLECTION_ROOMS, room.to_store())
        logger.info(f"[ROOMS] Created room {room.id} '{room.name}' in home {room.home_id}")

        draft.reset()
        return room

    async def create_room(
        self,
        user_id: str,
        home_id: str,
        name: str,
        files: Sequence[ImageFile],
    ) -> RoomDocument:
        draft = RoomDraft(home_id=home_id, name=name, files=list(files))
        await self.analyze_draft(user_id, draft)
        return await self.save_draft(user_id, draft)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def rooms_for_home(self, home_id: str) -> list[RoomDocument]:
        """Rooms of a home in canonical walkthrough order."""
        docs = await self.store.query(COLLECTION_ROOMS, [("homeId", home_id)], order_by="createdAt")
        return order_by_creation([RoomDocument.from_store(d) for d in docs])

    async def list_rooms(self, user_id: str, home_id: str) -> list[RoomDocument]:
        await self.homes.get_home(user_id, home_id)
        return [r for r in await self.rooms_for_home(home_id) if r.user_id == user_id]

    async def get_room(self, user_id: str, room_id: str) -> RoomDocument:
        data = await self.store.get(COLLECTION_ROOMS, room_id)
        if not data or data.get("userId") != user_id:
            raise NotFound("Room not found")
        return RoomDocument.from_store(data)

    def subscribe_rooms(
        self,
        user_id: str,
        home_id: str,
        on_change: Callable[[list[RoomDocument]], None],
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> Unsubscribe:
        return self.store.subscribe(
            COLLECTION_ROOMS,
            [("userId", user_id), ("homeId", home_id)],
            lambda docs: on_change(order_by_creation([RoomDocument.from_store(d) for d in docs])),
            on_error,
        )

    # ------------------------------------------------------------------
    # Owner-side comparison (nothing persisted)
    # ------------------------------------------------------------------

    async def compare(self, user_id: str, room_id: str, files: Sequence[ImageFile]) -> AdHocComparison:
        room = await self.get_room(user_id, room_id)
        validate_image_files(files, self.max_upload_size_mb)
        if not room.reference_images:
            raise NoReferenceImages("No reference images found for the selected room.")

        urls = await self.uploader.upload_many(files)
        result = await self.vision.compare(room.reference_images, urls)
        return AdHocComparison(room=room, uploaded_image_urls=urls, ai_comparison_result=result)
