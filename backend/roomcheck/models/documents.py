"""Document models for the Firestore collections.

Attributes are snake_case in Python and camelCase in the store. Use
``from_store`` on a snapshot dict (which carries its ``id``) and ``to_store``
to build a write payload.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from roomcheck.models.enums import InspectionStatus


class StoreDocument(BaseModel):
    """Base for documents persisted in the document store."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )

    id: Optional[str] = None

    @classmethod
    def from_store(cls, data: dict[str, Any]):
        return cls.model_validate(data)

    def to_store(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)


class HomeDocument(StoreDocument):
    """homes/{id}"""

    name: str
    address: Optional[str] = None
    user_id: str
    created_at: datetime


class RoomDocument(StoreDocument):
    """rooms/{id}"""

    home_id: str
    name: str
    reference_images: list[str] = Field(default_factory=list)
    initial_item_list: Optional[str] = None
    user_id: str
    created_at: datetime


class InspectionDocument(StoreDocument):
    """houseInspections/{id}"""

    home_id: str
    owner_user_id: str
    status: InspectionStatus = InspectionStatus.ACTIVE
    created_at: datetime
    started_by_tenant_at: Optional[datetime] = None
    completed_by_tenant_at: Optional[datetime] = None
    tenant_email: Optional[str] = None
    invited_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == InspectionStatus.ACTIVE.value


class ComparisonEvent(StoreDocument):
    """One upload-and-analysis attempt for a room."""

    uploaded_image_urls: list[str]
    ai_comparison_result: str
    timestamp: datetime


class RoomComparisonDocument(StoreDocument):
    """houseInspections/{id}/roomComparisons/{roomId}

    ``comparison_events`` is append-only; the last element is the current one.
    """

    room_name: str
    reference_image_urls: list[str] = Field(default_factory=list)
    comparison_events: list[ComparisonEvent] = Field(default_factory=list)

    @property
    def latest_event(self) -> Optional[ComparisonEvent]:
        return self.comparison_events[-1] if self.comparison_events else None
