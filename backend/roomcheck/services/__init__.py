"""Services for RoomCheck."""

from roomcheck.services.document_store import (
    DocumentStoreInterface,
    FirestoreDocumentStore,
    get_document_store,
)
from roomcheck.services.uploads import CloudinaryUploader, ImageFile, get_uploader
from roomcheck.services.vision import VisionComparisonClient, get_vision_client
from roomcheck.services.notifications import ReportServiceClient, get_report_service
from roomcheck.services.identity import FirebaseIdentityClient, get_identity_client
from roomcheck.services.homes import HomeService, HomeContext
from roomcheck.services.rooms import RoomService, RoomDraft
from roomcheck.services.comparisons import RoomComparisonStore
from roomcheck.services.inspection_links import InspectionLinkService
from roomcheck.services.walkthrough import InspectionWalkthrough
from roomcheck.services.pdf_generator import InspectionReportGenerator, get_report_generator

__all__ = [
    "DocumentStoreInterface",
    "FirestoreDocumentStore",
    "get_document_store",
    "CloudinaryUploader",
    "ImageFile",
    "get_uploader",
    "VisionComparisonClient",
    "get_vision_client",
    "ReportServiceClient",
    "get_report_service",
    "FirebaseIdentityClient",
    "get_identity_client",
    "HomeService",
    "HomeContext",
    "RoomService",
    "RoomDraft",
    "RoomComparisonStore",
    "InspectionLinkService",
    "InspectionWalkthrough",
    "InspectionReportGenerator",
    "get_report_generator",
]
