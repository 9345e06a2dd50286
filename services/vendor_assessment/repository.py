"""
Assessment Repository
=====================

Persistence boundary for vendors and assessments.

Rows written by older releases are normalized here so the rest of the
service only ever sees canonical values:
- localized tier labels ("Conforme", "In Progress", ...) become ComplianceTier
- a null or unknown validation state becomes PENDING
- bare string proofs become ProofReference

Version: 0.1.0
"""

import uuid
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import ValidationError
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from services.vendor_assessment.errors import InfrastructureUnavailableError, NotFoundError
from services.vendor_assessment.models import AssessmentModel, VendorModel
from shared.logging import get_logger
from shared.models.assessment import Assessment, ComplianceTier, ValidationState
from shared.models.proof import ProofReference
from shared.models.vendor import Vendor


logger = get_logger(__name__)


_LEGACY_TIERS: dict[str, ComplianceTier] = {
    "conforme": ComplianceTier.COMPLIANT,
    "compliant": ComplianceTier.COMPLIANT,
    "en cours": ComplianceTier.IN_PROGRESS,
    "in progress": ComplianceTier.IN_PROGRESS,
}


@dataclass(frozen=True)
class TransitionFields:
    """Fields written atomically by a review transition."""

    validation_state: ValidationState
    compliance_tier: ComplianceTier
    reviewer_id: str
    reviewed_at: datetime
    comments: str | None
    manual_tier_override: ComplianceTier | None


def normalize_tier(value: str | None) -> ComplianceTier:
    """Canonical tier for a stored value; anything unrecognized is NON_COMPLIANT."""
    if value is None:
        return ComplianceTier.NON_COMPLIANT
    try:
        return ComplianceTier(value)
    except ValueError:
        return _LEGACY_TIERS.get(value.strip().lower(), ComplianceTier.NON_COMPLIANT)


def normalize_validation_state(value: str | None) -> ValidationState:
    """Canonical validation state; null and unknown values read as PENDING."""
    if value is None:
        return ValidationState.PENDING
    try:
        return ValidationState(value)
    except ValueError:
        return ValidationState.PENDING


def normalize_override(value: str | None) -> ComplianceTier | None:
    if not value:
        return None
    try:
        return ComplianceTier(value)
    except ValueError:
        return None


def normalize_proofs(raw: dict[str, Any] | None) -> dict[str, ProofReference]:
    """Proof references from stored JSON, upgrading legacy strings."""
    proofs: dict[str, ProofReference] = {}
    for question_id, value in (raw or {}).items():
        try:
            if isinstance(value, str):
                proofs[question_id] = ProofReference.from_legacy(value)
            else:
                proofs[question_id] = ProofReference.model_validate(value)
        except (ValueError, ValidationError):
            logger.warning("proof_reference_unreadable", question_id=question_id)
    return proofs


def vendor_from_row(row: VendorModel) -> Vendor:
    return Vendor(
        id=str(row.id),
        name=row.name,
        contact_email=row.contact_email,
        invite_token=row.invite_token,
        created_at=row.created_at,
    )


def assessment_from_row(row: AssessmentModel) -> Assessment:
    return Assessment(
        id=str(row.id),
        vendor_id=str(row.vendor_id),
        answers={k: str(v) for k, v in (row.answers or {}).items() if v is not None},
        proofs=normalize_proofs(row.proofs),
        score=row.score or 0,
        compliance_tier=normalize_tier(row.compliance_tier),
        validation_state=normalize_validation_state(row.validation_state),
        reviewer_id=row.reviewer_id,
        reviewed_at=row.reviewed_at,
        comments=row.comments,
        manual_tier_override=normalize_override(row.manual_tier_override),
        created_at=row.created_at,
    )


def _parse_id(value: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class AssessmentRepository(ABC):
    """
    Abstract store for vendors and assessments.

    Lookups return None when nothing matches; callers decide whether that
    is a NotFoundError. Writes are durable when they return.
    """

    @abstractmethod
    async def create_vendor(self, name: str, contact_email: str, invite_token: str) -> Vendor:
        ...

    @abstractmethod
    async def get_vendor(self, vendor_id: str) -> Vendor | None:
        ...

    @abstractmethod
    async def get_vendor_by_token(self, token: str) -> Vendor | None:
        ...

    @abstractmethod
    async def list_vendors(self) -> list[Vendor]:
        """All vendors, newest first."""
        ...

    @abstractmethod
    async def delete_vendor(self, vendor_id: str) -> bool:
        """Delete a vendor and its assessments. False if it did not exist."""
        ...

    @abstractmethod
    async def create_assessment(
        self,
        vendor_id: str,
        answers: dict[str, str],
        proofs: dict[str, ProofReference],
        score: int,
        compliance_tier: ComplianceTier,
    ) -> Assessment:
        """Persist a new PENDING assessment."""
        ...

    @abstractmethod
    async def get_assessment(self, assessment_id: str) -> Assessment | None:
        ...

    @abstractmethod
    async def list_assessments(self, vendor_id: str) -> list[Assessment]:
        """Assessments of one vendor, newest first."""
        ...

    @abstractmethod
    async def list_all_assessments(self) -> list[Assessment]:
        ...

    @abstractmethod
    async def count_pending_assessments(self) -> int:
        ...

    @abstractmethod
    async def save_assessment_transition(
        self,
        assessment_id: str,
        fields: TransitionFields,
    ) -> Assessment:
        """
        Write all review fields in one atomic update.

        Raises:
            NotFoundError: assessment does not exist
        """
        ...


class PostgresAssessmentRepository(AssessmentRepository):
    """Repository backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error("repository_operation_failed", operation=operation, error=str(e))
            raise InfrastructureUnavailableError("Database unavailable") from e

    async def create_vendor(self, name: str, contact_email: str, invite_token: str) -> Vendor:
        with self._guard("create_vendor"):
            row = VendorModel(name=name, contact_email=contact_email, invite_token=invite_token)
            self.session.add(row)
            await self.session.commit()
            await self.session.refresh(row)
        return vendor_from_row(row)

    async def get_vendor(self, vendor_id: str) -> Vendor | None:
        parsed = _parse_id(vendor_id)
        if parsed is None:
            return None
        with self._guard("get_vendor"):
            row = await self.session.get(VendorModel, parsed)
        return vendor_from_row(row) if row else None

    async def get_vendor_by_token(self, token: str) -> Vendor | None:
        with self._guard("get_vendor_by_token"):
            result = await self.session.execute(
                select(VendorModel).where(VendorModel.invite_token == token)
            )
            row = result.scalar_one_or_none()
        return vendor_from_row(row) if row else None

    async def list_vendors(self) -> list[Vendor]:
        with self._guard("list_vendors"):
            result = await self.session.execute(
                select(VendorModel).order_by(VendorModel.created_at.desc())
            )
            rows = result.scalars().all()
        return [vendor_from_row(row) for row in rows]

    async def delete_vendor(self, vendor_id: str) -> bool:
        parsed = _parse_id(vendor_id)
        if parsed is None:
            return False
        with self._guard("delete_vendor"):
            await self.session.execute(
                delete(AssessmentModel).where(AssessmentModel.vendor_id == parsed)
            )
            result = await self.session.execute(
                delete(VendorModel).where(VendorModel.id == parsed)
            )
            await self.session.commit()
        return result.rowcount > 0

    async def create_assessment(
        self,
        vendor_id: str,
        answers: dict[str, str],
        proofs: dict[str, ProofReference],
        score: int,
        compliance_tier: ComplianceTier,
    ) -> Assessment:
        with self._guard("create_assessment"):
            row = AssessmentModel(
                vendor_id=uuid.UUID(vendor_id),
                answers=answers,
                proofs={k: ref.model_dump(mode="json") for k, ref in proofs.items()},
                score=score,
                compliance_tier=compliance_tier.value,
                validation_state=ValidationState.PENDING.value,
            )
            self.session.add(row)
            await self.session.commit()
            await self.session.refresh(row)
        return assessment_from_row(row)

    async def get_assessment(self, assessment_id: str) -> Assessment | None:
        parsed = _parse_id(assessment_id)
        if parsed is None:
            return None
        with self._guard("get_assessment"):
            row = await self.session.get(AssessmentModel, parsed)
        return assessment_from_row(row) if row else None

    async def list_assessments(self, vendor_id: str) -> list[Assessment]:
        parsed = _parse_id(vendor_id)
        if parsed is None:
            return []
        with self._guard("list_assessments"):
            result = await self.session.execute(
                select(AssessmentModel)
                .where(AssessmentModel.vendor_id == parsed)
                .order_by(AssessmentModel.created_at.desc())
            )
            rows = result.scalars().all()
        return [assessment_from_row(row) for row in rows]

    async def list_all_assessments(self) -> list[Assessment]:
        with self._guard("list_all_assessments"):
            result = await self.session.execute(
                select(AssessmentModel).order_by(AssessmentModel.created_at.desc())
            )
            rows = result.scalars().all()
        return [assessment_from_row(row) for row in rows]

    async def count_pending_assessments(self) -> int:
        with self._guard("count_pending_assessments"):
            result = await self.session.execute(
                select(func.count())
                .select_from(AssessmentModel)
                .where(
                    or_(
                        AssessmentModel.validation_state == ValidationState.PENDING.value,
                        AssessmentModel.validation_state.is_(None),
                    )
                )
            )
            return int(result.scalar_one())

    async def save_assessment_transition(
        self,
        assessment_id: str,
        fields: TransitionFields,
    ) -> Assessment:
        parsed = _parse_id(assessment_id)
        if parsed is None:
            raise NotFoundError("Assessment not found")

        with self._guard("save_assessment_transition"):
            row = await self.session.get(AssessmentModel, parsed)
            if row is None:
                raise NotFoundError("Assessment not found")

            row.validation_state = fields.validation_state.value
            row.compliance_tier = fields.compliance_tier.value
            row.reviewer_id = fields.reviewer_id
            row.reviewed_at = fields.reviewed_at
            row.comments = fields.comments
            row.manual_tier_override = (
                fields.manual_tier_override.value if fields.manual_tier_override else None
            )
            await self.session.commit()
            await self.session.refresh(row)

        logger.info(
            "assessment_transition_saved",
            assessment_id=assessment_id,
            validation_state=fields.validation_state.value,
            compliance_tier=fields.compliance_tier.value,
        )
        return assessment_from_row(row)
