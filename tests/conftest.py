"""
Test Configuration
==================

Pytest fixtures for VendorShield tests.
"""

import os
import uuid
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "admin123"
os.environ["SMTP_HOST"] = ""
os.environ["PROOF_STORAGE_BACKEND"] = "inline"

from services.vendor_assessment.errors import NotFoundError  # noqa: E402
from services.vendor_assessment.repository import (  # noqa: E402
    AssessmentRepository,
    TransitionFields,
)
from shared.models.assessment import Assessment, ComplianceTier, ValidationState  # noqa: E402
from shared.models.proof import ProofReference  # noqa: E402
from shared.models.vendor import Vendor  # noqa: E402
from shared.notifications import NotificationDispatcher, NotificationResult  # noqa: E402
from shared.storage import InlineProofStore, ProofResolver  # noqa: E402


BASE_TIME = datetime(2024, 1, 1, 9, 0, tzinfo=UTC)


class InMemoryAssessmentRepository(AssessmentRepository):
    """Dictionary-backed repository for tests."""

    def __init__(self) -> None:
        self.vendors: dict[str, Vendor] = {}
        self.assessments: dict[str, Assessment] = {}
        self.transitions: list[tuple[str, TransitionFields]] = []
        self._tick = 0

    def _now(self) -> datetime:
        self._tick += 1
        return BASE_TIME + timedelta(minutes=self._tick)

    async def create_vendor(self, name: str, contact_email: str, invite_token: str) -> Vendor:
        vendor = Vendor(
            id=str(uuid.uuid4()),
            name=name,
            contact_email=contact_email,
            invite_token=invite_token,
            created_at=self._now(),
        )
        self.vendors[vendor.id] = vendor
        return vendor

    async def get_vendor(self, vendor_id: str) -> Vendor | None:
        return self.vendors.get(vendor_id)

    async def get_vendor_by_token(self, token: str) -> Vendor | None:
        return next((v for v in self.vendors.values() if v.invite_token == token), None)

    async def list_vendors(self) -> list[Vendor]:
        return sorted(self.vendors.values(), key=lambda v: v.created_at, reverse=True)

    async def delete_vendor(self, vendor_id: str) -> bool:
        if self.vendors.pop(vendor_id, None) is None:
            return False
        self.assessments = {
            k: a for k, a in self.assessments.items() if a.vendor_id != vendor_id
        }
        return True

    async def create_assessment(
        self,
        vendor_id: str,
        answers: dict[str, str],
        proofs: dict[str, ProofReference],
        score: int,
        compliance_tier: ComplianceTier,
    ) -> Assessment:
        assessment = Assessment(
            id=str(uuid.uuid4()),
            vendor_id=vendor_id,
            answers=answers,
            proofs=proofs,
            score=score,
            compliance_tier=compliance_tier,
            created_at=self._now(),
        )
        self.assessments[assessment.id] = assessment
        return assessment

    async def get_assessment(self, assessment_id: str) -> Assessment | None:
        return self.assessments.get(assessment_id)

    async def list_assessments(self, vendor_id: str) -> list[Assessment]:
        return sorted(
            (a for a in self.assessments.values() if a.vendor_id == vendor_id),
            key=lambda a: a.created_at,
            reverse=True,
        )

    async def list_all_assessments(self) -> list[Assessment]:
        return list(self.assessments.values())

    async def count_pending_assessments(self) -> int:
        return sum(
            1 for a in self.assessments.values() if a.validation_state == ValidationState.PENDING
        )

    async def save_assessment_transition(
        self,
        assessment_id: str,
        fields: TransitionFields,
    ) -> Assessment:
        current = self.assessments.get(assessment_id)
        if current is None:
            raise NotFoundError("Assessment not found")
        updated = current.model_copy(
            update={
                "validation_state": fields.validation_state,
                "compliance_tier": fields.compliance_tier,
                "reviewer_id": fields.reviewer_id,
                "reviewed_at": fields.reviewed_at,
                "comments": fields.comments,
                "manual_tier_override": fields.manual_tier_override,
            }
        )
        self.assessments[assessment_id] = updated
        self.transitions.append((assessment_id, fields))
        return updated

    def add(self, assessment: Assessment) -> Assessment:
        """Seed a fully built assessment."""
        self.assessments[assessment.id] = assessment
        return assessment


class RecordingNotifier(NotificationDispatcher):
    """Notifier that records calls instead of sending."""

    def __init__(
        self,
        result: NotificationResult | None = None,
        error: Exception | None = None,
    ) -> None:
        self.calls: list[dict[str, Any]] = []
        self.result = result or NotificationResult(success=True, message_id="<test@vendorshield>")
        self.error = error

    async def notify(
        self,
        vendor: Vendor,
        assessment: Assessment,
        kind: ValidationState,
        locale: str,
    ) -> NotificationResult:
        self.calls.append(
            {"vendor": vendor, "assessment": assessment, "kind": kind, "locale": locale}
        )
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
def repository() -> InMemoryAssessmentRepository:
    return InMemoryAssessmentRepository()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest_asyncio.fixture
async def vendor(repository: InMemoryAssessmentRepository) -> Vendor:
    """A registered vendor."""
    return await repository.create_vendor(
        name="Acme Hosting",
        contact_email="security@acme.example",
        invite_token="Ab3dEf6hJk9M",
    )


@pytest.fixture
def make_assessment(repository: InMemoryAssessmentRepository):
    """Factory seeding assessments directly into the repository."""

    def _make(vendor_id: str, **overrides: Any) -> Assessment:
        data: dict[str, Any] = {
            "id": str(uuid.uuid4()),
            "vendor_id": vendor_id,
            "score": 40,
            "compliance_tier": ComplianceTier.NON_COMPLIANT,
            "created_at": repository._now(),
        }
        data.update(overrides)
        return repository.add(Assessment(**data))

    return _make


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Bearer header for the reviewer account."""
    from shared.auth import create_access_token

    token = create_access_token({"sub": "admin", "roles": ["admin"]})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def vendor_assessment_client(
    repository: InMemoryAssessmentRepository,
    notifier: RecordingNotifier,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Vendor Assessment Service."""
    from services.vendor_assessment.dependencies import (
        get_notifier,
        get_proof_resolver,
        get_proof_store,
        get_repository,
    )
    from services.vendor_assessment.main import app

    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_proof_store] = lambda: InlineProofStore()
    app.dependency_overrides[get_proof_resolver] = lambda: ProofResolver([InlineProofStore()])

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
