"""Inspection schemas."""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, EmailStr, Field

from roomcheck.models.enums import InspectionStatus
from roomcheck.schemas.base import BaseSchema, StoredMixin
from roomcheck.schemas.home import HomeResponse


class InspectionResponse(BaseSchema, StoredMixin):
    home_id: str
    owner_user_id: str
    status: InspectionStatus
    started_by_tenant_at: Optional[datetime] = None
    completed_by_tenant_at: Optional[datetime] = None
    tenant_email: Optional[str] = None
    invited_at: Optional[datetime] = None


class IssuedLinkResponse(BaseSchema):
    """A freshly issued inspection and the link to hand to the tenant."""

    inspection: InspectionResponse
    url: str


class InviteRequest(BaseSchema):
    email: EmailStr


class ComparisonEventResponse(BaseSchema):
    uploaded_image_urls: list[str]
    ai_comparison_result: str
    timestamp: datetime


class RoomComparisonResponse(BaseSchema):
    room_id: str = Field(validation_alias=AliasChoices("room_id", "id"))
    room_name: str
    reference_image_urls: list[str] = []
    comparison_events: list[ComparisonEventResponse] = []
    latest_event: Optional[ComparisonEventResponse] = None


class InspectionDetailResponse(BaseSchema):
    """Owner view of one inspection with every room comparison so far."""

    inspection: InspectionResponse
    home: HomeResponse
    url: str
    comparisons: list[RoomComparisonResponse]
