"""Document models for RoomCheck."""

from roomcheck.models.documents import (
    StoreDocument,
    HomeDocument,
    RoomDocument,
    InspectionDocument,
    ComparisonEvent,
    RoomComparisonDocument,
)
from roomcheck.models.enums import InspectionStatus, WalkthroughState

__all__ = [
    "StoreDocument",
    "HomeDocument",
    "RoomDocument",
    "InspectionDocument",
    "ComparisonEvent",
    "RoomComparisonDocument",
    "InspectionStatus",
    "WalkthroughState",
]
