"""
Repository Tests
================

Tests for legacy normalization at the persistence boundary and for the
PostgreSQL repository's error mapping.

Version: 0.1.0
"""

import uuid
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from services.vendor_assessment.errors import InfrastructureUnavailableError, NotFoundError
from services.vendor_assessment.repository import (
    PostgresAssessmentRepository,
    TransitionFields,
    assessment_from_row,
    normalize_proofs,
    normalize_tier,
    normalize_validation_state,
)
from shared.models.assessment import ComplianceTier, ValidationState
from shared.models.proof import ProofStorageKind


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def legacy_row():
    """Assessment row written by an older release."""
    return MagicMock(
        id=uuid.uuid4(),
        vendor_id=uuid.uuid4(),
        answers={"mfa": "yes", "iam": None},
        proofs={
            "mfa": "/uploads/1700000000000-abc123def-mfa.pdf",
            "pra": "data:application/pdf;base64,JVBERi0=",
            "siem": "https://bucket.s3.amazonaws.com/proof.png",
        },
        score=72,
        compliance_tier="En cours",
        validation_state=None,
        reviewer_id=None,
        reviewed_at=None,
        comments=None,
        manual_tier_override=None,
        created_at=datetime(2023, 6, 1, tzinfo=UTC),
    )


# =============================================================================
# Normalization Tests
# =============================================================================


class TestNormalizeTier:
    """Tests for normalize_tier."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("COMPLIANT", ComplianceTier.COMPLIANT),
            ("Conforme", ComplianceTier.COMPLIANT),
            ("Compliant", ComplianceTier.COMPLIANT),
            ("IN_PROGRESS", ComplianceTier.IN_PROGRESS),
            ("En cours", ComplianceTier.IN_PROGRESS),
            ("In Progress", ComplianceTier.IN_PROGRESS),
            ("NON_COMPLIANT", ComplianceTier.NON_COMPLIANT),
            ("Non Conforme", ComplianceTier.NON_COMPLIANT),
            ("Non-Compliant", ComplianceTier.NON_COMPLIANT),
            ("garbage", ComplianceTier.NON_COMPLIANT),
            (None, ComplianceTier.NON_COMPLIANT),
        ],
    )
    def test_values(self, value, expected) -> None:
        assert normalize_tier(value) == expected


class TestNormalizeValidationState:
    """Tests for normalize_validation_state."""

    def test_null_is_pending(self) -> None:
        assert normalize_validation_state(None) == ValidationState.PENDING

    def test_unknown_is_pending(self) -> None:
        assert normalize_validation_state("ARCHIVED") == ValidationState.PENDING

    def test_canonical(self) -> None:
        assert normalize_validation_state("APPROVED") == ValidationState.APPROVED


class TestNormalizeProofs:
    """Tests for normalize_proofs."""

    def test_legacy_strings_classified(self, legacy_row) -> None:
        proofs = normalize_proofs(legacy_row.proofs)

        assert proofs["mfa"].kind == ProofStorageKind.LOCAL
        assert proofs["mfa"].locator == "1700000000000-abc123def-mfa.pdf"
        assert proofs["pra"].kind == ProofStorageKind.INLINE
        assert proofs["pra"].content_type == "application/pdf"
        assert proofs["pra"].locator == "JVBERi0="
        assert proofs["siem"].kind == ProofStorageKind.URL

    def test_structured_reference(self) -> None:
        proofs = normalize_proofs(
            {"pra": {"kind": "object", "locator": "vendorshield/proofs/v/pra.pdf"}}
        )
        assert proofs["pra"].kind == ProofStorageKind.OBJECT

    def test_unreadable_dropped(self) -> None:
        assert normalize_proofs({"pra": "ftp://old", "mfa": {"kind": "floppy"}}) == {}

    def test_none(self) -> None:
        assert normalize_proofs(None) == {}


class TestAssessmentFromRow:
    """Tests for row conversion."""

    def test_legacy_row(self, legacy_row) -> None:
        assessment = assessment_from_row(legacy_row)

        assert assessment.id == str(legacy_row.id)
        assert assessment.compliance_tier == ComplianceTier.IN_PROGRESS
        assert assessment.validation_state == ValidationState.PENDING
        assert assessment.answers == {"mfa": "yes"}
        assert set(assessment.proofs) == {"mfa", "pra", "siem"}


# =============================================================================
# PostgreSQL Repository Tests
# =============================================================================


class TestPostgresAssessmentRepository:
    """Tests for the SQLAlchemy repository against a mocked session."""

    @pytest.mark.asyncio
    async def test_database_error_is_infrastructure_error(self) -> None:
        session = AsyncMock()
        session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
        repository = PostgresAssessmentRepository(session)

        with pytest.raises(InfrastructureUnavailableError):
            await repository.list_vendors()

    @pytest.mark.asyncio
    async def test_invalid_id_is_not_found(self) -> None:
        session = AsyncMock()
        repository = PostgresAssessmentRepository(session)

        assert await repository.get_assessment("not-a-uuid") is None
        assert await repository.get_vendor("not-a-uuid") is None
        session.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_transition_on_missing_row(self) -> None:
        session = AsyncMock()
        session.get.return_value = None
        repository = PostgresAssessmentRepository(session)
        fields = TransitionFields(
            validation_state=ValidationState.APPROVED,
            compliance_tier=ComplianceTier.COMPLIANT,
            reviewer_id="admin",
            reviewed_at=datetime.now(UTC),
            comments=None,
            manual_tier_override=None,
        )

        with pytest.raises(NotFoundError):
            await repository.save_assessment_transition(str(uuid.uuid4()), fields)
        session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_transition_writes_all_fields(self, legacy_row) -> None:
        session = AsyncMock()
        session.get.return_value = legacy_row
        session.add = MagicMock()
        repository = PostgresAssessmentRepository(session)
        reviewed_at = datetime(2024, 2, 1, tzinfo=UTC)
        fields = TransitionFields(
            validation_state=ValidationState.APPROVED,
            compliance_tier=ComplianceTier.COMPLIANT,
            reviewer_id="admin",
            reviewed_at=reviewed_at,
            comments="ok",
            manual_tier_override=ComplianceTier.COMPLIANT,
        )

        result = await repository.save_assessment_transition(str(legacy_row.id), fields)

        assert legacy_row.validation_state == "APPROVED"
        assert legacy_row.compliance_tier == "COMPLIANT"
        assert legacy_row.manual_tier_override == "COMPLIANT"
        session.commit.assert_awaited_once()
        assert result.validation_state == ValidationState.APPROVED
        assert result.reviewed_at == reviewed_at

    @pytest.mark.asyncio
    async def test_count_pending_assessments(self) -> None:
        session = AsyncMock()
        result = MagicMock()
        result.scalar_one.return_value = 3
        session.execute.return_value = result
        repository = PostgresAssessmentRepository(session)

        assert await repository.count_pending_assessments() == 3
        session.execute.assert_awaited_once()
