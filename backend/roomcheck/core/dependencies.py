"""FastAPI dependencies wiring services to their clients."""

from fastapi import Depends

from roomcheck.core.config import Settings, get_settings
from roomcheck.services.document_store import DocumentStoreInterface, get_document_store
from roomcheck.services.homes import HomeService
from roomcheck.services.inspection_links import InspectionLinkService
from roomcheck.services.notifications import ReportServiceClient, get_report_service
from roomcheck.services.rooms import RoomService
from roomcheck.services.uploads import CloudinaryUploader, get_uploader
from roomcheck.services.vision import VisionComparisonClient, get_vision_client
from roomcheck.services.walkthrough import InspectionWalkthrough


def get_home_service(store: DocumentStoreInterface = Depends(get_document_store)) -> HomeService:
    return HomeService(store)


def get_room_service(
    store: DocumentStoreInterface = Depends(get_document_store),
    uploader: CloudinaryUploader = Depends(get_uploader),
    vision: VisionComparisonClient = Depends(get_vision_client),
    settings: Settings = Depends(get_settings),
) -> RoomService:
    return RoomService(store, uploader, vision, max_upload_size_mb=settings.max_upload_size_mb)


def get_inspection_service(
    store: DocumentStoreInterface = Depends(get_document_store),
    report_service: ReportServiceClient = Depends(get_report_service),
    settings: Settings = Depends(get_settings),
) -> InspectionLinkService:
    return InspectionLinkService(store, report_service, settings)


async def get_walkthrough(
    inspection_id: str,
    store: DocumentStoreInterface = Depends(get_document_store),
    uploader: CloudinaryUploader = Depends(get_uploader),
    vision: VisionComparisonClient = Depends(get_vision_client),
    settings: Settings = Depends(get_settings),
) -> InspectionWalkthrough:
    """A started walkthrough for the inspection in the path."""
    walkthrough = InspectionWalkthrough(
        inspection_id,
        store,
        uploader=uploader,
        vision=vision,
        max_upload_size_mb=settings.max_upload_size_mb,
    )
    return await walkthrough.start()
