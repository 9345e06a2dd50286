"""
Assessment Models
=================

Vocabulary and models for vendor security assessments.

Version: 0.1.0
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from shared.models.proof import ProofReference


class ComplianceTier(str, Enum):
    """Compliance tier derived from the score or set by a reviewer."""

    COMPLIANT = "COMPLIANT"
    IN_PROGRESS = "IN_PROGRESS"
    NON_COMPLIANT = "NON_COMPLIANT"


class ValidationState(str, Enum):
    """Reviewer workflow status of an assessment."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    NEEDS_CLARIFICATION = "NEEDS_CLARIFICATION"


class Answer(str, Enum):
    """Accepted questionnaire answers."""

    YES = "yes"
    NO = "no"
    NOT_APPLICABLE = "na"


class Assessment(BaseModel):
    """Full assessment record."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Unique assessment ID")
    vendor_id: str = Field(..., description="Vendor that submitted the answers")

    answers: dict[str, str] = Field(default_factory=dict)
    proofs: dict[str, ProofReference] = Field(default_factory=dict)

    score: int = Field(..., ge=0, le=100)
    compliance_tier: ComplianceTier
    validation_state: ValidationState = ValidationState.PENDING

    # Review metadata, overwritten by each transition
    reviewer_id: str | None = None
    reviewed_at: datetime | None = None
    comments: str | None = None
    manual_tier_override: ComplianceTier | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class AssessmentSummary(BaseModel):
    """Lightweight assessment summary for history lists."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    vendor_id: str
    score: int
    compliance_tier: ComplianceTier
    validation_state: ValidationState
    reviewer_id: str | None = None
    reviewed_at: datetime | None = None
    comments: str | None = None
    created_at: datetime


class ProofUpload(BaseModel):
    """Evidence file attached to a submission, base64 encoded."""

    filename: str = Field(default="file", max_length=255)
    content_type: str = Field(default="application/octet-stream", max_length=255)
    content_base64: str = Field(..., min_length=1)


class AssessmentSubmission(BaseModel):
    """Request model for a vendor submitting the questionnaire."""

    answers: dict[str, str] = Field(
        default_factory=dict,
        description="Question ID to answer (yes, no, na)",
    )
    proofs: dict[str, ProofUpload] = Field(
        default_factory=dict,
        description="Question ID to evidence file",
    )


class ApproveRequest(BaseModel):
    """Request model for approving an assessment."""

    comments: str | None = None
    manual_status: str | None = Field(
        default=None,
        description="Optional tier override (COMPLIANT, IN_PROGRESS, NON_COMPLIANT)",
    )


class ReviewCommentRequest(BaseModel):
    """Request model for reject and request-clarification."""

    comments: str | None = None


class AssessmentStatusView(BaseModel):
    """What a vendor sees on its status page."""

    vendor_name: str
    assessment_id: str
    validation_state: ValidationState
    validation_label: str
    comments: str | None = None
    reviewed_at: datetime | None = None
    submitted_at: datetime
