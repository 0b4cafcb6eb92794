"""Enumeration types for the RoomCheck domain model."""

from enum import Enum


class InspectionStatus(str, Enum):
    """Status of an inspection link. Moves forward only."""
    ACTIVE = "active"
    COMPLETED = "completed"
    INACTIVE = "inactive"


class WalkthroughState(str, Enum):
    """States of a tenant walkthrough session."""
    LOADING_INSPECTION = "loading-inspection"
    LOADING_ROOMS = "loading-rooms"
    # Per room
    IDLE = "idle"
    UPLOADING = "uploading"
    COMPARING = "comparing"
    RESULT_READY = "result-ready"
    SAVING = "saving"
    # Completion
    SUBMITTING = "submitting"
    DONE = "done"
    ERROR = "error"
