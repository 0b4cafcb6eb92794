"""Base schema utilities."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class StoredMixin(BaseModel):
    """Document id and creation time."""

    id: str
    created_at: datetime


class MessageResponse(BaseSchema):
    message: str
    detail: Optional[str] = None
