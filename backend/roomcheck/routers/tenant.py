"""Tenant router - the inspection walkthrough behind an inspection link.

No authentication: possession of the link is the credential.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, UploadFile

from roomcheck.core.dependencies import get_walkthrough
from roomcheck.routers.uploads import read_images
from roomcheck.schemas.inspection import ComparisonEventResponse
from roomcheck.schemas.walkthrough import (
    CompletionResponse,
    NavigationResponse,
    OverviewResponse,
    OverviewRoom,
    RoomViewResponse,
    TenantRoomResponse,
)
from roomcheck.services.document_store import DocumentStoreInterface, get_document_store
from roomcheck.services.notifications import ReportServiceClient, get_report_service
from roomcheck.services.walkthrough import (
    InspectionWalkthrough,
    Navigation,
    RoomStep,
    load_completed_inspection,
    room_path,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inspect", tags=["tenant"])


def _room_view(walkthrough: InspectionWalkthrough, step: RoomStep) -> RoomViewResponse:
    return RoomViewResponse(
        inspection_id=walkthrough.inspection_id,
        index=step.index,
        total=step.total,
        is_first=step.is_first,
        is_last=step.is_last,
        room=TenantRoomResponse.model_validate(step.room),
        latest_event=(
            ComparisonEventResponse.model_validate(step.latest_event) if step.latest_event else None
        ),
        state=walkthrough.state,
    )


def _navigation(nav: Navigation) -> NavigationResponse:
    return NavigationResponse(
        inspection_id=nav.inspection_id,
        room_index=nav.room_index,
        completed=nav.completed,
        path=nav.path,
    )


def _completion(inspection) -> CompletionResponse:
    return CompletionResponse(
        inspection_id=inspection.id,
        status=inspection.status,
        completed_by_tenant_at=inspection.completed_by_tenant_at,
    )


@router.get("/{inspection_id}", response_model=OverviewResponse)
async def get_overview(
    walkthrough: InspectionWalkthrough = Depends(get_walkthrough),
):
    """All rooms of the inspected home and which ones already have photos."""
    overview = await walkthrough.overview()
    rooms = [
        OverviewRoom(
            index=index,
            id=room.id,
            name=room.name,
            reference_images=room.reference_images,
            inspected=room.id in overview.inspected_room_ids,
        )
        for index, room in enumerate(overview.rooms)
    ]
    return OverviewResponse(
        inspection_id=walkthrough.inspection_id,
        status=overview.inspection.status,
        rooms=rooms,
        has_any_comparison=overview.has_any_comparison,
        first_room_path=room_path(walkthrough.inspection_id, 0) if rooms else None,
    )


@router.post("/{inspection_id}/submit", response_model=CompletionResponse)
async def submit_inspection(
    walkthrough: InspectionWalkthrough = Depends(get_walkthrough),
):
    """Submit from the overview. At least one room must have been compared."""
    return _completion(await walkthrough.submit())


@router.get("/{inspection_id}/room/{room_index}", response_model=RoomViewResponse)
async def get_room(
    room_index: int,
    walkthrough: InspectionWalkthrough = Depends(get_walkthrough),
):
    """The room at ``room_index``, resumed with its latest comparison if any."""
    return _room_view(walkthrough, await walkthrough.resume(room_index))


@router.post("/{inspection_id}/room/{room_index}/compare", response_model=RoomViewResponse)
async def compare_room(
    room_index: int,
    files: Optional[List[UploadFile]] = File(None),
    walkthrough: InspectionWalkthrough = Depends(get_walkthrough),
):
    """Upload photos, compare them with the room's reference images and save the result."""
    images = await read_images(files, walkthrough.max_upload_size_mb)
    return _room_view(walkthrough, await walkthrough.inspect_room(room_index, images))


@router.post("/{inspection_id}/room/{room_index}/next", response_model=NavigationResponse)
async def next_room(
    room_index: int,
    walkthrough: InspectionWalkthrough = Depends(get_walkthrough),
):
    """Go to the next room; on the last room this submits the inspection."""
    return _navigation(await walkthrough.advance(room_index))


@router.post("/{inspection_id}/room/{room_index}/back", response_model=NavigationResponse)
async def previous_room(
    room_index: int,
    walkthrough: InspectionWalkthrough = Depends(get_walkthrough),
):
    return _navigation(walkthrough.back(room_index))


@router.get("/{inspection_id}/complete", response_model=CompletionResponse)
async def get_completion(
    inspection_id: str,
    background_tasks: BackgroundTasks,
    store: DocumentStoreInterface = Depends(get_document_store),
    report_service: ReportServiceClient = Depends(get_report_service),
):
    """Completion screen. Kicks off report generation without waiting for it."""
    inspection = await load_completed_inspection(store, inspection_id)
    background_tasks.add_task(report_service.start_report, inspection_id)
    logger.info(f"[TENANT] Report generation queued for {inspection_id}")
    return _completion(inspection)
