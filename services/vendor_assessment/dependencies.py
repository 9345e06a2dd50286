"""
Vendor Assessment Dependencies
==============================

FastAPI dependency providers for the service's collaborators.

Tests replace these through ``app.dependency_overrides``.

Version: 0.1.0
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from services.vendor_assessment.errors import InfrastructureUnavailableError
from services.vendor_assessment.questionnaire import SUPPORTED_LOCALES, resolve_locale
from services.vendor_assessment.repository import AssessmentRepository, PostgresAssessmentRepository
from services.vendor_assessment.services import SubmissionService, ValidationService
from shared.config import settings
from shared.database.postgres import get_postgres_session
from shared.notifications import EmailNotificationDispatcher, NotificationDispatcher
from shared.storage import (
    ProofResolver,
    ProofStorageError,
    ProofStore,
    build_proof_resolver,
    build_proof_store,
)


async def get_repository(
    db: Annotated[AsyncSession, Depends(get_postgres_session)],
) -> AssessmentRepository:
    return PostgresAssessmentRepository(db)


@lru_cache
def get_notifier() -> NotificationDispatcher:
    return EmailNotificationDispatcher(settings.smtp, settings.base_url)


@lru_cache
def _proof_store() -> ProofStore:
    return build_proof_store(settings.storage)


def get_proof_store() -> ProofStore:
    try:
        return _proof_store()
    except ProofStorageError as e:
        raise InfrastructureUnavailableError(str(e)) from e


@lru_cache
def get_proof_resolver() -> ProofResolver:
    return build_proof_resolver(settings.storage)


def get_locale(
    lang: Annotated[str | None, Query(description="Display language (fr, en)")] = None,
    accept_language: Annotated[str | None, Header()] = None,
) -> str:
    """Locale from ``lang``, then Accept-Language, then the configured default."""
    for candidate in (lang, accept_language):
        if candidate:
            primary = candidate.split(",")[0].split("-")[0].strip().lower()
            if primary in SUPPORTED_LOCALES:
                return primary
    return resolve_locale(settings.default_locale)


def get_validation_service(
    repository: Annotated[AssessmentRepository, Depends(get_repository)],
    notifier: Annotated[NotificationDispatcher, Depends(get_notifier)],
) -> ValidationService:
    return ValidationService(repository, notifier)


def get_submission_service(
    repository: Annotated[AssessmentRepository, Depends(get_repository)],
) -> SubmissionService:
    """Registration, token lookup and status. Never touches proof storage."""
    return SubmissionService(repository, max_proof_bytes=settings.storage.max_size_bytes)


def get_intake_service(
    repository: Annotated[AssessmentRepository, Depends(get_repository)],
    proof_store: Annotated[ProofStore, Depends(get_proof_store)],
) -> SubmissionService:
    """Submission service able to store proofs."""
    return SubmissionService(
        repository,
        proof_store,
        max_proof_bytes=settings.storage.max_size_bytes,
    )
