"""Home schemas."""

from typing import Optional

from pydantic import Field

from roomcheck.schemas.base import BaseSchema, StoredMixin


class HomeCreate(BaseSchema):
    """Create a new home."""

    name: str = Field(..., min_length=1, max_length=255)
    address: Optional[str] = Field(None, max_length=500)


class HomeResponse(BaseSchema, StoredMixin):
    name: str
    address: Optional[str] = None
    user_id: str


class HomeContextResponse(BaseSchema):
    """The owner's homes with the selected one resolved."""

    homes: list[HomeResponse]
    selected_home_id: Optional[str] = None
