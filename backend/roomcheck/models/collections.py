"""Firestore collection names.

Firestore has no DDL or migrations; collections appear on first write. These
constants are the single source of truth for the document layout.
"""

COLLECTION_HOMES = "homes"
COLLECTION_ROOMS = "rooms"
COLLECTION_INSPECTIONS = "houseInspections"

# Sub-collection of houseInspections/{inspectionId}, keyed by room id
SUBCOLLECTION_ROOM_COMPARISONS = "roomComparisons"


def room_comparisons_path(inspection_id: str) -> str:
    return f"{COLLECTION_INSPECTIONS}/{inspection_id}/{SUBCOLLECTION_ROOM_COMPARISONS}"
