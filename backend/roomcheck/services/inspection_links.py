"""Inspection link issuance and owner-side inspection management."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from roomcheck.core.config import Settings, get_settings
from roomcheck.core.exceptions import InvalidInput, InvalidState, NotFound
from roomcheck.models.collections import COLLECTION_INSPECTIONS
from roomcheck.models.documents import HomeDocument, InspectionDocument, RoomComparisonDocument
from roomcheck.models.enums import InspectionStatus
from roomcheck.services.comparisons import RoomComparisonStore
from roomcheck.services.document_store import DocumentStoreInterface
from roomcheck.services.homes import HomeService
from roomcheck.services.notifications import ReportServiceClient
from roomcheck.services.rooms import RoomService

logger = logging.getLogger(__name__)

INVITE_SUBJECT = "Your rental inspection for {home_name}"

INVITE_CONTENT = (
    "Hello,\n\n"
    "You have been invited to complete a room-by-room inspection of {home_name}{address}.\n"
    "Open the link below, walk through each room and take a photo when asked:\n\n"
    "{link}\n\n"
    "Thank you."
)


@dataclass
class IssuedLink:
    inspection: InspectionDocument
    url: str


@dataclass
class InspectionDetail:
    inspection: InspectionDocument
    home: HomeDocument
    comparisons: list[RoomComparisonDocument]
    url: str


class InspectionLinkService:
    def __init__(
        self,
        store: DocumentStoreInterface,
        report_service: Optional[ReportServiceClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.report_service = report_service
        self.settings = settings or get_settings()
        self.homes = HomeService(store)
        self.comparisons = RoomComparisonStore(store)
        self.rooms = RoomService(store)

    async def issue(self, user_id: str, home_id: str) -> IssuedLink:
        """Create an active inspection for an owned home and return its deep link."""
        await self.homes.get_home(user_id, home_id)

        inspection = InspectionDocument(
            home_id=home_id,
            owner_user_id=user_id,
            status=InspectionStatus.ACTIVE,
            created_at=datetime.now(timezone.utc),
        )
        inspection.id = await self.store.add(COLLECTION_INSPECTIONS, inspection.to_store())
        logger.info(f"[INSPECTIONS] Issued inspection {inspection.id} for home {home_id}")
        return IssuedLink(inspection=inspection, url=self.settings.inspection_link(inspection.id))

    async def list_for_home(self, user_id: str, home_id: str) -> list[InspectionDocument]:
        """Newest first."""
        await self.homes.get_home(user_id, home_id)
        docs = await self.store.query(
            COLLECTION_INSPECTIONS,
            [("homeId", home_id), ("ownerUserId", user_id)],
        )
        inspections = [InspectionDocument.from_store(d) for d in docs]
        return sorted(inspections, key=lambda i: (i.created_at, i.id or ""), reverse=True)

    async def get_owned(self, user_id: str, inspection_id: str) -> InspectionDocument:
        data = await self.store.get(COLLECTION_INSPECTIONS, inspection_id)
        if not data or data.get("ownerUserId") != user_id:
            raise NotFound("Inspection not found")
        return InspectionDocument.from_store(data)

    async def detail(self, user_id: str, inspection_id: str) -> InspectionDetail:
        inspection = await self.get_owned(user_id, inspection_id)
        home = await self.homes.get_home(user_id, inspection.home_id)
        comparisons = await self.comparisons.list(inspection_id)

        # walkthrough order; rooms deleted since come last
        order = {room.id: i for i, room in enumerate(await self.rooms.rooms_for_home(home.id))}
        comparisons.sort(key=lambda c: (order.get(c.id, len(order)), c.room_name))
        return InspectionDetail(
            inspection=inspection,
            home=home,
            comparisons=comparisons,
            url=self.settings.inspection_link(inspection_id),
        )

    async def deactivate(self, user_id: str, inspection_id: str) -> InspectionDocument:
        inspection = await self.get_owned(user_id, inspection_id)
        if not inspection.is_active:
            raise InvalidState(f"Inspection is already {inspection.status}")

        await self.store.update(
            COLLECTION_INSPECTIONS, inspection_id, {"status": InspectionStatus.INACTIVE.value}
        )
        inspection.status = InspectionStatus.INACTIVE.value
        logger.info(f"[INSPECTIONS] Deactivated inspection {inspection_id}")
        return inspection

    async def send_invite(self, user_id: str, inspection_id: str, email: str) -> InspectionDocument:
        """Email the deep link to a tenant and remember who was invited."""
        email = (email or "").strip()
        if not email:
            raise InvalidInput("Tenant email is required.")

        inspection = await self.get_owned(user_id, inspection_id)
        if not inspection.is_active:
            raise InvalidState("Only active inspections can be sent to a tenant.")
        home = await self.homes.get_home(user_id, inspection.home_id)

        link = self.settings.inspection_link(inspection_id)
        await self.report_service.send_email(
            email=email,
            subject=INVITE_SUBJECT.format(home_name=home.name),
            email_content=INVITE_CONTENT.format(
                home_name=home.name,
                address=f" ({home.address})" if home.address else "",
                link=link,
            ),
        )

        invited_at = datetime.now(timezone.utc)
        await self.store.update(
            COLLECTION_INSPECTIONS, inspection_id, {"tenantEmail": email, "invitedAt": invited_at}
        )
        inspection.tenant_email = email
        inspection.invited_at = invited_at
        return inspection
