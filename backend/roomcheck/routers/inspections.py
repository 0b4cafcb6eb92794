"""Inspections router - issuing and managing tenant inspection links."""

import io
from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import StreamingResponse

from roomcheck.core.dependencies import get_inspection_service
from roomcheck.core.security import AuthenticatedUser, get_current_user
from roomcheck.schemas.inspection import (
    InspectionDetailResponse,
    InspectionResponse,
    InviteRequest,
    IssuedLinkResponse,
)
from roomcheck.services.inspection_links import InspectionLinkService
from roomcheck.services.pdf_generator import InspectionReportGenerator, get_report_generator

router = APIRouter(tags=["inspections"])


@router.post(
    "/homes/{home_id}/inspections",
    response_model=IssuedLinkResponse,
    status_code=status.HTTP_201_CREATED,
)
async def issue_inspection(
    home_id: str,
    inspections: InspectionLinkService = Depends(get_inspection_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Issue a new inspection link for a home."""
    issued = await inspections.issue(current_user.uid, home_id)
    return IssuedLinkResponse.model_validate(issued)


@router.get("/homes/{home_id}/inspections", response_model=List[InspectionResponse])
async def list_inspections(
    home_id: str,
    inspections: InspectionLinkService = Depends(get_inspection_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Inspections of a home, newest first."""
    return [
        InspectionResponse.model_validate(i)
        for i in await inspections.list_for_home(current_user.uid, home_id)
    ]


@router.get("/inspections/{inspection_id}", response_model=InspectionDetailResponse)
async def get_inspection(
    inspection_id: str,
    inspections: InspectionLinkService = Depends(get_inspection_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Inspection with every room comparison recorded so far."""
    detail = await inspections.detail(current_user.uid, inspection_id)
    return InspectionDetailResponse.model_validate(detail)


@router.post("/inspections/{inspection_id}/invite", response_model=InspectionResponse)
async def invite_tenant(
    inspection_id: str,
    data: InviteRequest,
    inspections: InspectionLinkService = Depends(get_inspection_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Email the inspection link to a tenant."""
    inspection = await inspections.send_invite(current_user.uid, inspection_id, data.email)
    return InspectionResponse.model_validate(inspection)


@router.post("/inspections/{inspection_id}/deactivate", response_model=InspectionResponse)
async def deactivate_inspection(
    inspection_id: str,
    inspections: InspectionLinkService = Depends(get_inspection_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Revoke an active link. Tenants opening it afterwards are turned away."""
    inspection = await inspections.deactivate(current_user.uid, inspection_id)
    return InspectionResponse.model_validate(inspection)


@router.get("/inspections/{inspection_id}/report.pdf")
async def download_report(
    inspection_id: str,
    inspections: InspectionLinkService = Depends(get_inspection_service),
    generator: InspectionReportGenerator = Depends(get_report_generator),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Download the inspection report as a PDF."""
    detail = await inspections.detail(current_user.uid, inspection_id)
    pdf_bytes = generator.generate(detail)
    headers = {"Content-Disposition": f'inline; filename="inspection_{inspection_id}_report.pdf"'}
    return StreamingResponse(io.BytesIO(pdf_bytes), media_type="application/pdf", headers=headers)
