"""
Dashboard Service
=================

KPI aggregation for the admin overview.

KPIs:
- vendor counts per tier of their latest assessment
- share of compliant vendors
- assessments awaiting review
- average days from a vendor's first submission to its first COMPLIANT one

Version: 0.1.0
"""

import math
from collections import defaultdict
from collections.abc import Iterable

from services.vendor_assessment.errors import NotFoundError
from services.vendor_assessment.questionnaire import tier_label
from services.vendor_assessment.repository import AssessmentRepository
from shared.logging import get_logger
from shared.models.assessment import (
    Assessment,
    AssessmentSummary,
    ComplianceTier,
    ValidationState,
)
from shared.models.vendor import Dashboard, DashboardKPIs, Vendor, VendorDetail, VendorSummary


logger = get_logger(__name__)

_SECONDS_PER_DAY = 86400


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _days_to_compliance(history: list[Assessment]) -> int | None:
    """Whole days from first submission to first COMPLIANT assessment, oldest first."""
    if not history:
        return None
    first_at = history[0].created_at
    for assessment in history:
        if assessment.compliance_tier == ComplianceTier.COMPLIANT:
            reached_at = assessment.reviewed_at or assessment.created_at
            if reached_at < first_at:
                return None
            return math.ceil((reached_at - first_at).total_seconds() / _SECONDS_PER_DAY)
    return None


def build_dashboard(
    vendors: Iterable[Vendor],
    assessments: Iterable[Assessment],
    locale: str | None = None,
    pending_count: int | None = None,
) -> Dashboard:
    """
    Vendor rows and KPIs from raw records.

    Vendors without an assessment show score 0 and tier IN_PROGRESS.
    ``pending_count`` comes from the repository when given, otherwise
    it is counted from ``assessments``.
    """
    history: dict[str, list[Assessment]] = defaultdict(list)
    pending = 0
    for assessment in assessments:
        history[assessment.vendor_id].append(assessment)
        if assessment.validation_state == ValidationState.PENDING:
            pending += 1
    if pending_count is not None:
        pending = pending_count

    rows: list[VendorSummary] = []
    counts = {tier: 0 for tier in ComplianceTier}
    days: list[int] = []

    for vendor in vendors:
        vendor_history = sorted(history.get(vendor.id, []), key=lambda a: a.created_at)
        latest = vendor_history[-1] if vendor_history else None
        tier = latest.compliance_tier if latest else ComplianceTier.IN_PROGRESS
        counts[tier] += 1

        rows.append(
            VendorSummary(
                id=vendor.id,
                name=vendor.name,
                contact_email=vendor.contact_email,
                invite_token=vendor.invite_token,
                score=latest.score if latest else 0,
                compliance_tier=tier,
                compliance_label=tier_label(tier, locale),
                validation_state=latest.validation_state if latest else None,
                latest_assessment_at=latest.created_at if latest else None,
            )
        )

        elapsed = _days_to_compliance(vendor_history)
        if elapsed is not None:
            days.append(elapsed)

    total = len(rows)
    kpis = DashboardKPIs(
        total_vendors=total,
        compliant_count=counts[ComplianceTier.COMPLIANT],
        in_progress_count=counts[ComplianceTier.IN_PROGRESS],
        non_compliant_count=counts[ComplianceTier.NON_COMPLIANT],
        compliant_percentage=(
            _round_half_up(counts[ComplianceTier.COMPLIANT] / total * 100) if total else 0
        ),
        pending_count=pending,
        average_compliance_days=_round_half_up(sum(days) / len(days)) if days else 0,
    )
    return Dashboard(vendors=rows, kpis=kpis)


async def load_dashboard(repository: AssessmentRepository, locale: str | None = None) -> Dashboard:
    """Dashboard over every vendor in the repository."""
    vendors = await repository.list_vendors()
    assessments = await repository.list_all_assessments()
    pending = await repository.count_pending_assessments()
    dashboard = build_dashboard(vendors, assessments, locale, pending_count=pending)
    logger.debug(
        "dashboard_built",
        vendors=dashboard.kpis.total_vendors,
        pending=dashboard.kpis.pending_count,
    )
    return dashboard


async def load_vendor_detail(repository: AssessmentRepository, vendor_id: str) -> VendorDetail:
    """
    Vendor with its assessment history, newest first.

    Raises:
        NotFoundError: unknown vendor
    """
    vendor = await repository.get_vendor(vendor_id)
    if vendor is None:
        raise NotFoundError("Vendor not found")
    assessments = await repository.list_assessments(vendor_id)
    return VendorDetail(
        vendor=vendor,
        assessments=[AssessmentSummary.model_validate(a, from_attributes=True) for a in assessments],
    )
