"""
Assessments Routes
==================

Reviewer endpoints for assessments: detail, decisions and proofs.

Version: 0.1.0
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import RedirectResponse

from services.vendor_assessment.dependencies import (
    get_locale,
    get_proof_resolver,
    get_repository,
    get_validation_service,
)
from services.vendor_assessment.errors import InfrastructureUnavailableError, NotFoundError
from services.vendor_assessment.repository import AssessmentRepository
from services.vendor_assessment.services import ValidationService
from shared.auth import User, require_reviewer
from shared.logging import get_logger
from shared.models.assessment import Assessment, ApproveRequest, ReviewCommentRequest
from shared.storage import ProofNotFoundError, ProofResolver, ProofStorageError, safe_filename


logger = get_logger(__name__)

router = APIRouter()


@router.get("/{assessment_id}", response_model=Assessment)
async def get_assessment(
    assessment_id: str,
    repository: Annotated[AssessmentRepository, Depends(get_repository)],
    user: Annotated[User, Depends(require_reviewer)],
) -> Assessment:
    """
    Get assessment details.
    """
    assessment = await repository.get_assessment(assessment_id)
    if assessment is None:
        raise NotFoundError("Assessment not found")
    return assessment


@router.post("/{assessment_id}/approve", response_model=Assessment)
async def approve_assessment(
    assessment_id: str,
    request: ApproveRequest,
    service: Annotated[ValidationService, Depends(get_validation_service)],
    locale: Annotated[str, Depends(get_locale)],
    user: Annotated[User, Depends(require_reviewer)],
) -> Assessment:
    """
    Approve an assessment, optionally overriding its tier.
    """
    return await service.approve(
        assessment_id,
        reviewer_id=user.id,
        comments=request.comments,
        override_tier=request.manual_status,
        locale=locale,
    )


@router.post("/{assessment_id}/reject", response_model=Assessment)
async def reject_assessment(
    assessment_id: str,
    request: ReviewCommentRequest,
    service: Annotated[ValidationService, Depends(get_validation_service)],
    locale: Annotated[str, Depends(get_locale)],
    user: Annotated[User, Depends(require_reviewer)],
) -> Assessment:
    """
    Reject an assessment. Comments are required.
    """
    return await service.reject(
        assessment_id,
        reviewer_id=user.id,
        comments=request.comments,
        locale=locale,
    )


@router.post("/{assessment_id}/request-clarification", response_model=Assessment)
async def request_clarification(
    assessment_id: str,
    request: ReviewCommentRequest,
    service: Annotated[ValidationService, Depends(get_validation_service)],
    locale: Annotated[str, Depends(get_locale)],
    user: Annotated[User, Depends(require_reviewer)],
) -> Assessment:
    """
    Ask the vendor for clarifications. Comments are required.
    """
    return await service.request_clarification(
        assessment_id,
        reviewer_id=user.id,
        comments=request.comments,
        locale=locale,
    )


@router.get("/{assessment_id}/proofs/{question_id}")
async def get_proof(
    assessment_id: str,
    question_id: str,
    repository: Annotated[AssessmentRepository, Depends(get_repository)],
    resolver: Annotated[ProofResolver, Depends(get_proof_resolver)],
    user: Annotated[User, Depends(require_reviewer)],
) -> Response:
    """
    Serve the proof attached to one answer.

    Object and URL proofs redirect; inline and local proofs are streamed.
    """
    assessment = await repository.get_assessment(assessment_id)
    if assessment is None:
        raise NotFoundError("Assessment not found")

    reference = assessment.proofs.get(question_id)
    if reference is None:
        raise NotFoundError("Proof not found")

    try:
        resolved = await resolver.resolve(reference)
    except ProofNotFoundError as e:
        raise NotFoundError("Proof not found") from e
    except ProofStorageError as e:
        logger.error(
            "proof_resolution_failed",
            assessment_id=assessment_id,
            question_id=question_id,
            kind=reference.kind.value,
            error=str(e),
        )
        raise InfrastructureUnavailableError("Proof storage unavailable") from e

    if resolved.redirect_url:
        return RedirectResponse(resolved.redirect_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    filename = safe_filename(reference.filename or question_id)
    return Response(
        content=resolved.content or b"",
        media_type=resolved.content_type,
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
