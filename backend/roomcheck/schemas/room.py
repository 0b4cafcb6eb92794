"""Room schemas."""

from typing import Optional

from roomcheck.schemas.base import BaseSchema, StoredMixin


class RoomResponse(BaseSchema, StoredMixin):
    home_id: str
    name: str
    reference_images: list[str] = []
    initial_item_list: Optional[str] = None
    user_id: str


class AdHocComparisonResponse(BaseSchema):
    """Result of an owner-side comparison. Not persisted."""

    room: RoomResponse
    uploaded_image_urls: list[str]
    ai_comparison_result: str
