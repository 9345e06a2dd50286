"""
Portal Routes
=============

Vendor-facing endpoints. The invitation token in the path is the only
credential.

Version: 0.1.0
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from services.vendor_assessment.dependencies import (
    get_intake_service,
    get_locale,
    get_submission_service,
)
from services.vendor_assessment.questionnaire import LocalizedQuestion, get_questions
from services.vendor_assessment.services import SubmissionService
from shared.models.assessment import Assessment, AssessmentStatusView, AssessmentSubmission
from shared.models.vendor import Vendor, VendorCreate


router = APIRouter()

questionnaire_router = APIRouter()


class PortalView(BaseModel):
    """Vendor landing page: who it is and what to answer."""

    vendor_id: str
    vendor_name: str
    locale: str
    questions: list[LocalizedQuestion]


class RegistrationResponse(BaseModel):
    """Result of a vendor self-registration."""

    vendor_id: str
    invite_token: str


@questionnaire_router.get("", response_model=list[LocalizedQuestion])
async def questionnaire(
    locale: Annotated[str, Depends(get_locale)],
) -> list[LocalizedQuestion]:
    """
    The questionnaire in the requested language.
    """
    return get_questions(locale)


@router.post("/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: VendorCreate,
    service: Annotated[SubmissionService, Depends(get_submission_service)],
) -> RegistrationResponse:
    """
    Vendor self-registration. Returns the invitation token.
    """
    vendor: Vendor = await service.create_vendor(request)
    return RegistrationResponse(vendor_id=vendor.id, invite_token=vendor.invite_token)


@router.get("/{token}", response_model=PortalView)
async def portal(
    token: str,
    service: Annotated[SubmissionService, Depends(get_submission_service)],
    locale: Annotated[str, Depends(get_locale)],
) -> PortalView:
    """
    Vendor identity and localized questionnaire for a token.
    """
    vendor = await service.get_vendor_by_token(token)
    return PortalView(
        vendor_id=vendor.id,
        vendor_name=vendor.name,
        locale=locale,
        questions=get_questions(locale),
    )


@router.post("/{token}/assessments", response_model=Assessment, status_code=status.HTTP_201_CREATED)
async def submit_assessment(
    token: str,
    submission: AssessmentSubmission,
    service: Annotated[SubmissionService, Depends(get_intake_service)],
) -> Assessment:
    """
    Submit questionnaire answers with optional base64 proofs.
    """
    return await service.submit(token, submission)


@router.get("/{token}/status", response_model=AssessmentStatusView)
async def assessment_status(
    token: str,
    service: Annotated[SubmissionService, Depends(get_submission_service)],
    locale: Annotated[str, Depends(get_locale)],
) -> AssessmentStatusView:
    """
    Validation status and reviewer comments of the latest assessment.
    """
    return await service.get_status(token, locale)
