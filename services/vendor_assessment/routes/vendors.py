"""
Vendors Routes
==============

Admin endpoints for vendor management and the dashboard.

Version: 0.1.0
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from services.vendor_assessment.dependencies import (
    get_locale,
    get_repository,
    get_submission_service,
)
from services.vendor_assessment.repository import AssessmentRepository
from services.vendor_assessment.services import (
    SubmissionService,
    load_dashboard,
    load_vendor_detail,
)
from shared.auth import User, require_reviewer
from shared.models.vendor import Dashboard, Vendor, VendorCreate, VendorDetail


router = APIRouter()


@router.get("", response_model=Dashboard)
async def list_vendors(
    repository: Annotated[AssessmentRepository, Depends(get_repository)],
    locale: Annotated[str, Depends(get_locale)],
    user: Annotated[User, Depends(require_reviewer)],
) -> Dashboard:
    """
    Dashboard: every vendor with its latest score and tier, plus KPIs.
    """
    return await load_dashboard(repository, locale)


@router.post("", response_model=Vendor, status_code=status.HTTP_201_CREATED)
async def create_vendor(
    request: VendorCreate,
    service: Annotated[SubmissionService, Depends(get_submission_service)],
    user: Annotated[User, Depends(require_reviewer)],
) -> Vendor:
    """
    Create a vendor and issue its invitation token.
    """
    return await service.create_vendor(request)


@router.get("/{vendor_id}", response_model=VendorDetail)
async def get_vendor(
    vendor_id: str,
    repository: Annotated[AssessmentRepository, Depends(get_repository)],
    user: Annotated[User, Depends(require_reviewer)],
) -> VendorDetail:
    """
    Vendor with its assessment history, newest first.
    """
    return await load_vendor_detail(repository, vendor_id)


@router.delete("/{vendor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vendor(
    vendor_id: str,
    service: Annotated[SubmissionService, Depends(get_submission_service)],
    user: Annotated[User, Depends(require_reviewer)],
) -> Response:
    """
    Delete a vendor and all its assessments.
    """
    await service.delete_vendor(vendor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
