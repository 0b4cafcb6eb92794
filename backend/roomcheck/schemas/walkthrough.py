"""Tenant walkthrough schemas."""

from datetime import datetime
from typing import Optional

from roomcheck.models.enums import InspectionStatus, WalkthroughState
from roomcheck.schemas.base import BaseSchema
from roomcheck.schemas.inspection import ComparisonEventResponse


class TenantRoomResponse(BaseSchema):
    """A room as the tenant sees it. Owner-only fields are left out."""

    id: str
    name: str
    reference_images: list[str] = []


class OverviewRoom(TenantRoomResponse):
    index: int
    inspected: bool = False


class OverviewResponse(BaseSchema):
    inspection_id: str
    status: InspectionStatus
    rooms: list[OverviewRoom]
    has_any_comparison: bool
    first_room_path: Optional[str] = None


class RoomViewResponse(BaseSchema):
    inspection_id: str
    index: int
    total: int
    is_first: bool
    is_last: bool
    room: TenantRoomResponse
    latest_event: Optional[ComparisonEventResponse] = None
    state: WalkthroughState = WalkthroughState.IDLE


class NavigationResponse(BaseSchema):
    inspection_id: str
    room_index: Optional[int] = None
    completed: bool = False
    path: str


class CompletionResponse(BaseSchema):
    inspection_id: str
    status: InspectionStatus
    completed_by_tenant_at: Optional[datetime] = None
    message: str = "Thank you! Your inspection has been submitted."
