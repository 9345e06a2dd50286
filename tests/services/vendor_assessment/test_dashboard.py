"""
Dashboard Tests
===============

Tests for admin KPI aggregation.

Version: 0.1.0
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from services.vendor_assessment.errors import NotFoundError
from services.vendor_assessment.services.dashboard import (
    build_dashboard,
    load_dashboard,
    load_vendor_detail,
)
from shared.models.assessment import Assessment, ComplianceTier, ValidationState
from shared.models.vendor import Vendor


T0 = datetime(2024, 1, 1, tzinfo=UTC)


def _vendor(vendor_id: str) -> Vendor:
    return Vendor(
        id=vendor_id,
        name=f"Vendor {vendor_id}",
        contact_email=f"{vendor_id}@example.com",
        invite_token=f"token{vendor_id}",
        created_at=T0,
    )


def _assessment(
    assessment_id: str,
    vendor_id: str,
    tier: ComplianceTier,
    created_at: datetime,
    score: int = 50,
    state: ValidationState = ValidationState.PENDING,
    reviewed_at: datetime | None = None,
) -> Assessment:
    return Assessment(
        id=assessment_id,
        vendor_id=vendor_id,
        score=score,
        compliance_tier=tier,
        validation_state=state,
        reviewed_at=reviewed_at,
        created_at=created_at,
    )


class TestBuildDashboard:
    """Tests for build_dashboard."""

    def test_empty(self) -> None:
        dashboard = build_dashboard([], [])

        assert dashboard.vendors == []
        assert dashboard.kpis.total_vendors == 0
        assert dashboard.kpis.compliant_percentage == 0
        assert dashboard.kpis.average_compliance_days == 0

    def test_vendor_without_assessment_defaults(self) -> None:
        dashboard = build_dashboard([_vendor("a")], [], locale="en")
        row = dashboard.vendors[0]

        assert row.score == 0
        assert row.compliance_tier == ComplianceTier.IN_PROGRESS
        assert row.compliance_label == "In Progress"
        assert row.validation_state is None
        assert dashboard.kpis.in_progress_count == 1

    def test_uses_latest_assessment(self) -> None:
        assessments = [
            _assessment("1", "a", ComplianceTier.NON_COMPLIANT, T0, score=20),
            _assessment("2", "a", ComplianceTier.COMPLIANT, T0 + timedelta(days=3), score=90),
        ]
        row = build_dashboard([_vendor("a")], assessments).vendors[0]

        assert row.score == 90
        assert row.compliance_tier == ComplianceTier.COMPLIANT
        assert row.compliance_label == "Conforme"

    def test_kpis(self) -> None:
        vendors = [_vendor("a"), _vendor("b"), _vendor("c"), _vendor("d")]
        assessments = [
            # a: compliant after 2.5 days -> 3
            _assessment("1", "a", ComplianceTier.NON_COMPLIANT, T0, state=ValidationState.REJECTED),
            _assessment(
                "2",
                "a",
                ComplianceTier.COMPLIANT,
                T0 + timedelta(days=1),
                state=ValidationState.APPROVED,
                reviewed_at=T0 + timedelta(days=2, hours=12),
            ),
            # b: compliant on first submission -> 0
            _assessment("3", "b", ComplianceTier.COMPLIANT, T0),
            # c: in progress
            _assessment("4", "c", ComplianceTier.IN_PROGRESS, T0),
            # d: no assessment -> counted as in progress
        ]

        kpis = build_dashboard(vendors, assessments).kpis

        assert kpis.total_vendors == 4
        assert kpis.compliant_count == 2
        assert kpis.in_progress_count == 2
        assert kpis.non_compliant_count == 0
        assert kpis.compliant_percentage == 50
        assert kpis.pending_count == 2
        # (3 + 0) / 2 = 1.5 rounds half up
        assert kpis.average_compliance_days == 2

    def test_compliant_percentage_rounds(self) -> None:
        vendors = [_vendor("a"), _vendor("b"), _vendor("c")]
        assessments = [_assessment("1", "a", ComplianceTier.COMPLIANT, T0)]

        assert build_dashboard(vendors, assessments).kpis.compliant_percentage == 33


class TestLoaders:
    """Tests for repository-backed loaders."""

    @pytest.mark.asyncio
    async def test_load_dashboard(self, repository, vendor, make_assessment) -> None:
        make_assessment(vendor.id, score=85, compliance_tier=ComplianceTier.COMPLIANT)

        dashboard = await load_dashboard(repository, "en")

        assert dashboard.kpis.total_vendors == 1
        assert dashboard.vendors[0].compliance_label == "Compliant"

    @pytest.mark.asyncio
    async def test_load_dashboard_pending_from_repository(
        self, repository, vendor, make_assessment
    ) -> None:
        make_assessment(vendor.id)
        repository.count_pending_assessments = AsyncMock(return_value=7)

        dashboard = await load_dashboard(repository)

        assert dashboard.kpis.pending_count == 7
        repository.count_pending_assessments.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_vendor_detail_newest_first(self, repository, vendor, make_assessment) -> None:
        first = make_assessment(vendor.id)
        second = make_assessment(vendor.id)

        detail = await load_vendor_detail(repository, vendor.id)

        assert detail.vendor.id == vendor.id
        assert [a.id for a in detail.assessments] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_vendor_detail_unknown(self, repository) -> None:
        with pytest.raises(NotFoundError):
            await load_vendor_detail(repository, "missing")
