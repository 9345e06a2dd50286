"""
Submission Service
==================

Vendor side of the workflow: registration, invitation-token lookup,
questionnaire submission and status.

Workflow:
1. Vendor is created (by an admin or self-registration) with a token
2. Vendor opens the portal with its token and submits answers
3. Answers are scored, a tier is derived and a PENDING assessment is stored
4. Vendor polls the status of its latest assessment

Version: 0.1.0
"""

import base64
import binascii
import secrets
from collections.abc import Sequence

from services.vendor_assessment.errors import InvalidInputError, NotFoundError
from services.vendor_assessment.questionnaire import QUESTIONS, Question, validation_label
from services.vendor_assessment.repository import AssessmentRepository
from services.vendor_assessment.services.score import compute_score
from services.vendor_assessment.services.tier import DEFAULT_THRESHOLDS, TierThresholds, derive_status
from shared.logging import get_logger
from shared.models.assessment import (
    Answer,
    Assessment,
    AssessmentStatusView,
    AssessmentSubmission,
    ProofUpload,
)
from shared.models.proof import ProofReference
from shared.models.vendor import Vendor, VendorCreate
from shared.storage import ProofStorageError, ProofStore


logger = get_logger(__name__)


INVITE_TOKEN_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
INVITE_TOKEN_LENGTH = 12
_TOKEN_ATTEMPTS = 5

_ANSWER_VALUES = frozenset(a.value for a in Answer)


def generate_invite_token(length: int = INVITE_TOKEN_LENGTH) -> str:
    """Random invitation token without look-alike characters."""
    return "".join(secrets.choice(INVITE_TOKEN_ALPHABET) for _ in range(length))


def _decode_proof(question_id: str, upload: ProofUpload, max_bytes: int) -> bytes:
    try:
        content = base64.b64decode(upload.content_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidInputError(f"Proof for {question_id} is not valid base64") from e
    if len(content) > max_bytes:
        raise InvalidInputError(
            f"Proof for {question_id} exceeds the {max_bytes} byte limit"
        )
    return content


class SubmissionService:
    """
    Service for vendors and their questionnaire submissions.

    Handles:
    - Vendor creation with a unique invitation token
    - Answer filtering, scoring and tier derivation
    - Proof upload through the configured store
    """

    def __init__(
        self,
        repository: AssessmentRepository,
        proof_store: ProofStore | None = None,
        questions: Sequence[Question] = QUESTIONS,
        thresholds: TierThresholds = DEFAULT_THRESHOLDS,
        max_proof_bytes: int = 10 * 1024 * 1024,
    ) -> None:
        self.repository = repository
        self.proof_store = proof_store
        self.questions = tuple(questions)
        self.thresholds = thresholds
        self.max_proof_bytes = max_proof_bytes
        self._question_ids = frozenset(q.id for q in self.questions)

    async def create_vendor(self, request: VendorCreate) -> Vendor:
        """
        Create a vendor and issue its invitation token.

        Raises:
            InvalidInputError: no unused token could be generated
        """
        for _ in range(_TOKEN_ATTEMPTS):
            token = generate_invite_token()
            if await self.repository.get_vendor_by_token(token) is None:
                break
        else:
            raise InvalidInputError("Could not allocate an invitation token")

        vendor = await self.repository.create_vendor(
            name=request.name,
            contact_email=request.contact_email,
            invite_token=token,
        )
        logger.info("vendor_created", vendor_id=vendor.id, name=vendor.name)
        return vendor

    async def get_vendor_by_token(self, token: str) -> Vendor:
        """
        Raises:
            NotFoundError: token does not match a vendor
        """
        vendor = await self.repository.get_vendor_by_token(token)
        if vendor is None:
            logger.warning("invite_token_unknown")
            raise NotFoundError("Vendor not found")
        return vendor

    async def delete_vendor(self, vendor_id: str) -> None:
        """
        Delete a vendor with its assessment history.

        Raises:
            NotFoundError: unknown vendor
        """
        if not await self.repository.delete_vendor(vendor_id):
            raise NotFoundError("Vendor not found")
        logger.info("vendor_deleted", vendor_id=vendor_id)

    def _filter_answers(self, answers: dict[str, str]) -> dict[str, str]:
        """
        Answers to known questions, values kept as given.

        Scoring counts unrecognized values as "no" and empty ones as unanswered.
        """
        accepted: dict[str, str] = {}
        for question_id, value in answers.items():
            if question_id not in self._question_ids:
                logger.debug("answer_unknown_question_ignored", question_id=question_id)
                continue
            if value and value not in _ANSWER_VALUES:
                logger.debug("answer_unrecognized", question_id=question_id)
            accepted[question_id] = value
        return accepted

    async def _store_proofs(
        self,
        vendor: Vendor,
        uploads: dict[str, bytes],
        submission: AssessmentSubmission,
    ) -> dict[str, ProofReference]:
        proofs: dict[str, ProofReference] = {}
        if not uploads:
            return proofs
        if self.proof_store is None:
            logger.warning("proof_store_unavailable", vendor_id=vendor.id, count=len(uploads))
            return proofs

        for question_id, content in uploads.items():
            upload = submission.proofs[question_id]
            try:
                proofs[question_id] = await self.proof_store.save(
                    vendor.id,
                    upload.filename,
                    upload.content_type,
                    content,
                )
            except ProofStorageError as e:
                # Submission goes through without this proof
                logger.warning(
                    "proof_upload_failed",
                    vendor_id=vendor.id,
                    question_id=question_id,
                    error=str(e),
                )
        return proofs

    async def submit(self, token: str, submission: AssessmentSubmission) -> Assessment:
        """
        Score and store a questionnaire submission.

        Args:
            token: Vendor invitation token
            submission: Answers and optional base64 proofs

        Returns:
            The new PENDING assessment

        Raises:
            NotFoundError: unknown token
            InvalidInputError: unusable proof
        """
        vendor = await self.get_vendor_by_token(token)
        answers = self._filter_answers(submission.answers)

        uploads: dict[str, bytes] = {}
        for question_id, upload in submission.proofs.items():
            if question_id not in self._question_ids:
                logger.debug("proof_unknown_question_ignored", question_id=question_id)
                continue
            uploads[question_id] = _decode_proof(question_id, upload, self.max_proof_bytes)

        proofs = await self._store_proofs(vendor, uploads, submission)

        score = compute_score(answers, self.questions)
        tier = derive_status(score, self.thresholds)

        assessment = await self.repository.create_assessment(
            vendor_id=vendor.id,
            answers=answers,
            proofs=proofs,
            score=score,
            compliance_tier=tier,
        )

        logger.info(
            "assessment_submitted",
            assessment_id=assessment.id,
            vendor_id=vendor.id,
            score=score,
            compliance_tier=tier.value,
            proofs=len(proofs),
        )
        return assessment

    async def get_status(self, token: str, locale: str | None = None) -> AssessmentStatusView:
        """
        Validation status of the vendor's latest assessment.

        Raises:
            NotFoundError: unknown token or nothing submitted yet
        """
        vendor = await self.get_vendor_by_token(token)
        assessments = await self.repository.list_assessments(vendor.id)
        if not assessments:
            raise NotFoundError("No assessment found")

        latest = assessments[0]
        return AssessmentStatusView(
            vendor_name=vendor.name,
            assessment_id=latest.id,
            validation_state=latest.validation_state,
            validation_label=validation_label(latest.validation_state, locale),
            comments=latest.comments,
            reviewed_at=latest.reviewed_at,
            submitted_at=latest.created_at,
        )
