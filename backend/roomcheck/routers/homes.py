"""Homes router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse

from roomcheck.core.dependencies import get_home_service
from roomcheck.core.security import AuthenticatedUser, get_current_user
from roomcheck.models.documents import HomeDocument
from roomcheck.routers.streaming import SSE_HEADERS, snapshot_events
from roomcheck.schemas.home import HomeContextResponse, HomeCreate, HomeResponse
from roomcheck.services.homes import HomeService

router = APIRouter(prefix="/homes", tags=["homes"])


def _serialize_homes(homes: List[HomeDocument]) -> list:
    return [HomeResponse.model_validate(h).model_dump(mode="json") for h in homes]


@router.get("", response_model=HomeContextResponse)
async def list_homes(
    selected_home_id: Optional[str] = None,
    homes: HomeService = Depends(get_home_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """The owner's homes, oldest first, with the selected home resolved.

    An unknown or missing ``selected_home_id`` falls back to the first home.
    """
    context = await homes.load_context(current_user.uid, selected_home_id)
    return HomeContextResponse.model_validate(context)


@router.post("", response_model=HomeContextResponse, status_code=status.HTTP_201_CREATED)
async def create_home(
    data: HomeCreate,
    homes: HomeService = Depends(get_home_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Create a home. The new home becomes the selected one."""
    home = await homes.create_home(current_user.uid, data.name, data.address)
    context = await homes.load_context(current_user.uid, home.id)
    return HomeContextResponse.model_validate(context)


@router.get("/stream")
async def stream_homes(
    request: Request,
    homes: HomeService = Depends(get_home_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Live list of the owner's homes as server-sent events."""
    events = snapshot_events(
        request,
        lambda on_change, on_error: homes.subscribe_homes(current_user.uid, on_change, on_error),
        _serialize_homes,
    )
    return StreamingResponse(events, media_type="text/event-stream", headers=SSE_HEADERS)


@router.get("/{home_id}", response_model=HomeResponse)
async def get_home(
    home_id: str,
    homes: HomeService = Depends(get_home_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    return HomeResponse.model_validate(await homes.get_home(current_user.uid, home_id))


@router.delete("/{home_id}", status_code=status.HTTP_501_NOT_IMPLEMENTED)
async def delete_home(
    home_id: str,
    homes: HomeService = Depends(get_home_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Deleting homes is not supported yet; ownership is still checked."""
    await homes.delete_home(current_user.uid, home_id)
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Deleting homes is not supported yet",
    )
