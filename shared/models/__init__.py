"""
Shared Models
=============

Pydantic models shared across VendorShield services.

Models:
- Vendor models (Vendor, VendorCreate, VendorSummary, Dashboard)
- Assessment models (Assessment, ComplianceTier, ValidationState, Answer)
- Proof models (ProofReference, ProofStorageKind)
- Common response models
"""

from shared.models.assessment import (
    Answer,
    ApproveRequest,
    Assessment,
    AssessmentStatusView,
    AssessmentSubmission,
    AssessmentSummary,
    ComplianceTier,
    ProofUpload,
    ReviewCommentRequest,
    ValidationState,
)
from shared.models.common import (
    ErrorResponse,
    HealthResponse,
)
from shared.models.proof import ProofReference, ProofStorageKind
from shared.models.vendor import (
    Dashboard,
    DashboardKPIs,
    Vendor,
    VendorCreate,
    VendorDetail,
    VendorSummary,
)

__all__ = [
    # Vendor
    "Vendor",
    "VendorCreate",
    "VendorDetail",
    "VendorSummary",
    "Dashboard",
    "DashboardKPIs",
    # Assessment
    "Answer",
    "Assessment",
    "AssessmentSummary",
    "AssessmentSubmission",
    "AssessmentStatusView",
    "ApproveRequest",
    "ReviewCommentRequest",
    "ComplianceTier",
    "ValidationState",
    "ProofUpload",
    # Proof
    "ProofReference",
    "ProofStorageKind",
    # Common
    "ErrorResponse",
    "HealthResponse",
]
