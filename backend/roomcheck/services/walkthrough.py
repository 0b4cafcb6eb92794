"""Tenant inspection walkthrough.

A walkthrough session drives a tenant through the rooms of the inspected home
in canonical order (creation time, then id). Each HTTP request builds one
session, calls ``start()`` and then performs a single action on it:

    loading-inspection -> loading-rooms -> idle
    idle -> uploading -> comparing -> result-ready -> saving -> idle
    idle -> submitting -> done

Per-room failures (bad input, upload, vision or save errors) return the session
to ``idle`` on the same room and record a message the tenant can dismiss and
retry from. Inspection-level failures (missing or inactive inspection, room
index out of range) move it to the terminal ``error`` state. The inspection's
status is checked again when saving and submitting, so a session opened before
another one submitted cannot write to the completed inspection.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from roomcheck.core.exceptions import (
    IndexOutOfRange,
    InvalidState,
    NoReferenceImages,
    NotFound,
    RoomCheckError,
)
from roomcheck.models.collections import COLLECTION_INSPECTIONS
from roomcheck.models.documents import ComparisonEvent, InspectionDocument, RoomDocument
from roomcheck.models.enums import InspectionStatus, WalkthroughState
from roomcheck.services.comparisons import RoomComparisonStore
from roomcheck.services.document_store import DocumentStoreInterface
from roomcheck.services.rooms import RoomService
from roomcheck.services.uploads import CloudinaryUploader, ImageFile, validate_image_files
from roomcheck.services.vision import VisionComparisonClient

logger = logging.getLogger(__name__)

S = WalkthroughState

ALLOWED_TRANSITIONS: dict[WalkthroughState, set[WalkthroughState]] = {
    S.LOADING_INSPECTION: {S.LOADING_ROOMS, S.ERROR},
    S.LOADING_ROOMS: {S.IDLE, S.ERROR},
    S.IDLE: {S.UPLOADING, S.SUBMITTING, S.ERROR},
    S.UPLOADING: {S.COMPARING, S.IDLE},
    S.COMPARING: {S.RESULT_READY, S.IDLE},
    S.RESULT_READY: {S.SAVING, S.IDLE},
    S.SAVING: {S.IDLE},
    S.SUBMITTING: {S.DONE, S.IDLE},
    S.DONE: set(),
    S.ERROR: set(),
}


def room_path(inspection_id: str, room_index: int) -> str:
    return f"/inspect/{inspection_id}/room/{room_index}"


def complete_path(inspection_id: str) -> str:
    return f"/inspect/{inspection_id}/complete"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RoomStep:
    """What the tenant sees for one room."""

    index: int
    total: int
    room: RoomDocument
    latest_event: Optional[ComparisonEvent] = None

    @property
    def is_first(self) -> bool:
        return self.index == 0

    @property
    def is_last(self) -> bool:
        return self.index == self.total - 1


@dataclass
class Navigation:
    """Where the tenant goes next."""

    inspection_id: str
    room_index: Optional[int]
    completed: bool = False

    @property
    def path(self) -> str:
        if self.completed:
            return complete_path(self.inspection_id)
        return room_path(self.inspection_id, self.room_index)


@dataclass
class Overview:
    inspection: InspectionDocument
    rooms: list[RoomDocument]
    inspected_room_ids: set[str]

    @property
    def has_any_comparison(self) -> bool:
        return bool(self.inspected_room_ids)


class InspectionWalkthrough:
    """One tenant session over an active inspection."""

    def __init__(
        self,
        inspection_id: str,
        store: DocumentStoreInterface,
        uploader: Optional[CloudinaryUploader] = None,
        vision: Optional[VisionComparisonClient] = None,
        max_upload_size_mb: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.inspection_id = inspection_id
        self.store = store
        self.uploader = uploader
        self.vision = vision
        self.max_upload_size_mb = max_upload_size_mb
        self.clock = clock
        self.comparisons = RoomComparisonStore(store)
        self.room_service = RoomService(store)

        self.state = S.LOADING_INSPECTION
        self.inspection: Optional[InspectionDocument] = None
        self.rooms: list[RoomDocument] = []
        self.room_index: Optional[int] = None
        self.message: Optional[str] = None

    # ------------------------------------------------------------------
    # State handling
    # ------------------------------------------------------------------

    def _transition(self, target: WalkthroughState) -> None:
        if target not in ALLOWED_TRANSITIONS[self.state]:
            raise InvalidState(f"Cannot go from {self.state.value} to {target.value}")
        logger.debug(f"[WALKTHROUGH] {self.inspection_id}: {self.state.value} -> {target.value}")
        self.state = target

    def _fail(self, error: RoomCheckError) -> None:
        """Terminal failure for this session."""
        logger.info(f"[WALKTHROUGH] {self.inspection_id} failed in {self.state.value}: {error.message}")
        self.message = error.message
        self.state = S.ERROR

    def _recover(self, error: RoomCheckError) -> None:
        """Per-room failure: stay on the room, back to idle."""
        logger.info(f"[WALKTHROUGH] {self.inspection_id} room {self.room_index}: {error.message}")
        self.message = error.message
        self.state = S.IDLE

    def _closed(self) -> InvalidState:
        """The inspection stopped being active while this session was open."""
        error = InvalidState("This inspection is no longer active.")
        self._fail(error)
        return error

    async def _still_active(self) -> bool:
        data = await self.store.get(COLLECTION_INSPECTIONS, self.inspection_id)
        return bool(data) and data.get("status") == InspectionStatus.ACTIVE.value

    def dismiss_message(self) -> None:
        self.message = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def start(self) -> "InspectionWalkthrough":
        """Load the inspection and its rooms. Inspection errors are terminal."""
        try:
            self.inspection = await self._load_inspection()
            self._transition(S.LOADING_ROOMS)
            self.rooms = await self.room_service.rooms_for_home(self.inspection.home_id)
            self._transition(S.IDLE)
        except (NotFound, InvalidState) as e:
            self._fail(e)
            raise
        return self

    async def _load_inspection(self) -> InspectionDocument:
        data = await self.store.get(COLLECTION_INSPECTIONS, self.inspection_id)
        if not data:
            raise NotFound("Invalid inspection link.")

        inspection = InspectionDocument.from_store(data)
        if not inspection.is_active:
            raise InvalidState(f"This inspection is {inspection.status} and can no longer be used.")

        if inspection.started_by_tenant_at is None:
            started_at = self.clock()
            await self.store.update(
                COLLECTION_INSPECTIONS, self.inspection_id, {"startedByTenantAt": started_at}
            )
            inspection.started_by_tenant_at = started_at
            logger.info(f"[WALKTHROUGH] Tenant started inspection {self.inspection_id}")
        return inspection

    def select_room(self, room_index: int) -> RoomDocument:
        if not 0 <= room_index < len(self.rooms):
            error = IndexOutOfRange(f"Room {room_index} not found in this inspection.")
            self._fail(error)
            raise error
        self.room_index = room_index
        return self.rooms[room_index]

    async def overview(self) -> Overview:
        comparisons = await self.comparisons.list(self.inspection_id)
        return Overview(
            inspection=self.inspection,
            rooms=list(self.rooms),
            inspected_room_ids={c.id for c in comparisons},
        )

    async def resume(self, room_index: int) -> RoomStep:
        """The room as the tenant left it: latest comparison event, if any."""
        room = self.select_room(room_index)
        comparison = await self.comparisons.get(self.inspection_id, room.id)
        return RoomStep(
            index=room_index,
            total=len(self.rooms),
            room=room,
            latest_event=comparison.latest_event if comparison else None,
        )

    # ------------------------------------------------------------------
    # Per-room work
    # ------------------------------------------------------------------

    async def upload_and_compare(self, room_index: int, files: Sequence[ImageFile]) -> ComparisonEvent:
        room = self.select_room(room_index)
        try:
            validate_image_files(files, self.max_upload_size_mb)
            if not room.reference_images:
                raise NoReferenceImages(f"Room '{room.name}' has no reference images to compare against.")

            self._transition(S.UPLOADING)
            urls = await self.uploader.upload_many(files)

            self._transition(S.COMPARING)
            result = await self.vision.compare(room.reference_images, urls)
        except RoomCheckError as e:
            self._recover(e)
            raise

        self._transition(S.RESULT_READY)
        return ComparisonEvent(
            uploaded_image_urls=urls,
            ai_comparison_result=result,
            timestamp=self.clock(),
        )

    async def persist(self, room_index: int, event: ComparisonEvent) -> None:
        room = self.rooms[room_index]
        self._transition(S.SAVING)
        try:
            active = await self._still_active()
            if active:
                await self.comparisons.append_event(self.inspection_id, room, event)
        except RoomCheckError as e:
            self._recover(e)
            raise
        if not active:
            raise self._closed()
        self._transition(S.IDLE)

    async def inspect_room(self, room_index: int, files: Sequence[ImageFile]) -> RoomStep:
        """Upload, compare and save in one go; returns the room with the new event."""
        event = await self.upload_and_compare(room_index, files)
        await self.persist(room_index, event)
        self.message = None
        return RoomStep(index=room_index, total=len(self.rooms), room=self.rooms[room_index], latest_event=event)

    # ------------------------------------------------------------------
    # Navigation and submission
    # ------------------------------------------------------------------

    async def advance(self, room_index: int) -> Navigation:
        self.select_room(room_index)
        if room_index < len(self.rooms) - 1:
            return Navigation(self.inspection_id, room_index + 1)
        await self.submit()
        return Navigation(self.inspection_id, None, completed=True)

    def back(self, room_index: int) -> Navigation:
        self.select_room(room_index)
        return Navigation(self.inspection_id, max(room_index - 1, 0))

    async def submit(self) -> InspectionDocument:
        """Mark the inspection completed. Needs at least one compared room."""
        self._transition(S.SUBMITTING)
        try:
            if not await self.comparisons.list(self.inspection_id):
                raise InvalidState("Complete at least one room before submitting the inspection.")

            completed_at = self.clock()
            submitted = await self.store.update_if(
                COLLECTION_INSPECTIONS,
                self.inspection_id,
                {"status": InspectionStatus.COMPLETED.value, "completedByTenantAt": completed_at},
                expected={"status": InspectionStatus.ACTIVE.value},
            )
        except RoomCheckError as e:
            self._recover(e)
            raise
        if not submitted:
            raise self._closed()

        self.inspection.status = InspectionStatus.COMPLETED.value
        self.inspection.completed_by_tenant_at = completed_at
        self._transition(S.DONE)
        logger.info(f"[WALKTHROUGH] Inspection {self.inspection_id} completed")
        return self.inspection


async def load_completed_inspection(store: DocumentStoreInterface, inspection_id: str) -> InspectionDocument:
    """The inspection behind the completion screen; must already be completed."""
    data = await store.get(COLLECTION_INSPECTIONS, inspection_id)
    if not data:
        raise NotFound("Invalid inspection link.")
    inspection = InspectionDocument.from_store(data)
    if inspection.status != InspectionStatus.COMPLETED.value:
        raise InvalidState("This inspection has not been submitted yet.")
    return inspection
