"""Rooms router - room setup and owner-side comparisons."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import StreamingResponse

from roomcheck.core.dependencies import get_room_service
from roomcheck.core.security import AuthenticatedUser, get_current_user
from roomcheck.models.documents import RoomDocument
from roomcheck.routers.streaming import SSE_HEADERS, snapshot_events
from roomcheck.routers.uploads import read_images
from roomcheck.schemas.room import AdHocComparisonResponse, RoomResponse
from roomcheck.services.rooms import RoomService

router = APIRouter(tags=["rooms"])


def _serialize_rooms(rooms: List[RoomDocument]) -> list:
    return [RoomResponse.model_validate(r).model_dump(mode="json") for r in rooms]


@router.get("/homes/{home_id}/rooms", response_model=List[RoomResponse])
async def list_rooms(
    home_id: str,
    rooms: RoomService = Depends(get_room_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Rooms of a home in walkthrough order."""
    return [RoomResponse.model_validate(r) for r in await rooms.list_rooms(current_user.uid, home_id)]


@router.post("/homes/{home_id}/rooms", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
async def create_room(
    home_id: str,
    name: str = Form(""),
    files: Optional[List[UploadFile]] = File(None),
    rooms: RoomService = Depends(get_room_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Create a room from reference photos.

    The photos are uploaded and analyzed into an initial item list first; the
    room is only stored when both succeed.
    """
    images = await read_images(files, rooms.max_upload_size_mb)
    room = await rooms.create_room(current_user.uid, home_id, name, images)
    return RoomResponse.model_validate(room)


@router.get("/homes/{home_id}/rooms/stream")
async def stream_rooms(
    home_id: str,
    request: Request,
    rooms: RoomService = Depends(get_room_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Live list of a home's rooms as server-sent events."""
    await rooms.homes.get_home(current_user.uid, home_id)
    events = snapshot_events(
        request,
        lambda on_change, on_error: rooms.subscribe_rooms(current_user.uid, home_id, on_change, on_error),
        _serialize_rooms,
    )
    return StreamingResponse(events, media_type="text/event-stream", headers=SSE_HEADERS)


@router.get("/rooms/{room_id}", response_model=RoomResponse)
async def get_room(
    room_id: str,
    rooms: RoomService = Depends(get_room_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    return RoomResponse.model_validate(await rooms.get_room(current_user.uid, room_id))


@router.post("/rooms/{room_id}/compare", response_model=AdHocComparisonResponse)
async def compare_room(
    room_id: str,
    files: Optional[List[UploadFile]] = File(None),
    rooms: RoomService = Depends(get_room_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Compare fresh photos against the room's reference images. Nothing is saved."""
    images = await read_images(files, rooms.max_upload_size_mb)
    result = await rooms.compare(current_user.uid, room_id, images)
    return AdHocComparisonResponse.model_validate(result)
