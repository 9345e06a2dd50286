"""
Vendor Assessment Services
==========================

Business logic for vendor security assessments.

Services:
- compute_score / calculate_breakdown: Weighted questionnaire scoring
- derive_status: Score to compliance tier
- ValidationService: Reviewer decisions and notification
- SubmissionService: Vendor registration and submissions
- build_dashboard: Admin KPIs

Version: 0.1.0
"""

from services.vendor_assessment.services.dashboard import (
    build_dashboard,
    load_dashboard,
    load_vendor_detail,
)
from services.vendor_assessment.services.score import (
    ScoreBreakdown,
    calculate_breakdown,
    compute_score,
)
from services.vendor_assessment.services.submission import (
    SubmissionService,
    generate_invite_token,
)
from services.vendor_assessment.services.tier import (
    DEFAULT_THRESHOLDS,
    TierThresholds,
    derive_status,
)
from services.vendor_assessment.services.validation import (
    ReviewAction,
    ValidationService,
    ValidationWorkflow,
    parse_tier_override,
)


__all__ = [
    # Score
    "ScoreBreakdown",
    "calculate_breakdown",
    "compute_score",
    # Tier
    "TierThresholds",
    "DEFAULT_THRESHOLDS",
    "derive_status",
    # Validation
    "ReviewAction",
    "ValidationService",
    "ValidationWorkflow",
    "parse_tier_override",
    # Submission
    "SubmissionService",
    "generate_invite_token",
    # Dashboard
    "build_dashboard",
    "load_dashboard",
    "load_vendor_detail",
]
