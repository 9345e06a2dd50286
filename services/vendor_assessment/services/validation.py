"""
Validation Workflow Service
===========================

Reviewer decisions on submitted assessments.

Workflow:
1. Vendor submits -> PENDING
2. Reviewer approves, rejects or requests clarification
3. Any state may be reviewed again; each decision overwrites the
   previous review metadata

Every transition is persisted before the vendor is notified. Notification
is best effort: a failed or unconfigured notifier never undoes a decision.

Version: 0.1.0
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from services.vendor_assessment.errors import InvalidInputError, NotFoundError
from services.vendor_assessment.questionnaire import DEFAULT_LOCALE
from services.vendor_assessment.repository import AssessmentRepository, TransitionFields
from shared.logging import get_logger
from shared.models.assessment import Assessment, ComplianceTier, ValidationState
from shared.notifications import NotificationDispatcher


logger = get_logger(__name__)


class ReviewAction(str, Enum):
    """Reviewer actions."""

    APPROVE = "approve"
    REJECT = "reject"
    REQUEST_CLARIFICATION = "request_clarification"


def _all_actions() -> dict[ReviewAction, ValidationState]:
    return {
        ReviewAction.APPROVE: ValidationState.APPROVED,
        ReviewAction.REJECT: ValidationState.REJECTED,
        ReviewAction.REQUEST_CLARIFICATION: ValidationState.NEEDS_CLARIFICATION,
    }


@dataclass
class ValidationWorkflow:
    """Validation state machine. Every state accepts every action."""

    transitions: dict[ValidationState, dict[ReviewAction, ValidationState]] = field(
        default_factory=lambda: {state: _all_actions() for state in ValidationState}
    )

    def can_transition(self, current: ValidationState, action: ReviewAction) -> bool:
        """Check if transition is valid."""
        return action in self.transitions.get(current, {})

    def get_next_state(
        self,
        current: ValidationState,
        action: ReviewAction,
    ) -> ValidationState | None:
        """Get the next state after an action."""
        if not self.can_transition(current, action):
            return None
        return self.transitions[current][action]


def parse_tier_override(value: str | ComplianceTier | None) -> ComplianceTier | None:
    """
    Reviewer-supplied tier override.

    None and the empty string mean no override.

    Raises:
        InvalidInputError: value is not a tier name
    """
    if value is None or value == "":
        return None
    if isinstance(value, ComplianceTier):
        return value
    try:
        return ComplianceTier(value.strip())
    except ValueError as e:
        allowed = ", ".join(t.value for t in ComplianceTier)
        raise InvalidInputError(f"Invalid manual status: {value}. Expected one of {allowed}") from e


def _require_comments(comments: str | None, action: ReviewAction) -> str:
    if comments is None or not comments.strip():
        raise InvalidInputError(f"Comments are required to {action.value.replace('_', ' ')}")
    return comments


class ValidationService:
    """
    Applies reviewer decisions to assessments.

    Handles:
    - Input validation before any state change
    - Atomic persistence of the transition
    - Vendor notification after the commit
    """

    def __init__(
        self,
        repository: AssessmentRepository,
        notifier: NotificationDispatcher | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.repository = repository
        self.notifier = notifier
        self.workflow = ValidationWorkflow()
        self._clock = clock or (lambda: datetime.now(UTC))

    async def approve(
        self,
        assessment_id: str,
        reviewer_id: str,
        comments: str | None = None,
        override_tier: str | ComplianceTier | None = None,
        locale: str = DEFAULT_LOCALE,
    ) -> Assessment:
        """
        Approve an assessment.

        The tier becomes ``override_tier`` when one is given, otherwise the
        stored tier is kept.

        Raises:
            InvalidInputError: malformed override
            NotFoundError: unknown assessment
        """
        override = parse_tier_override(override_tier)
        assessment = await self._load(assessment_id)

        fields = TransitionFields(
            validation_state=self._next_state(assessment, ReviewAction.APPROVE),
            compliance_tier=override or assessment.compliance_tier,
            reviewer_id=reviewer_id,
            reviewed_at=self._clock(),
            comments=comments,
            manual_tier_override=override,
        )
        return await self._apply(assessment, ReviewAction.APPROVE, fields, locale)

    async def reject(
        self,
        assessment_id: str,
        reviewer_id: str,
        comments: str | None,
        locale: str = DEFAULT_LOCALE,
    ) -> Assessment:
        """
        Reject an assessment. The tier is forced to NON_COMPLIANT; a stored
        override is kept for the record.

        Raises:
            InvalidInputError: comments missing or blank
            NotFoundError: unknown assessment
        """
        comments = _require_comments(comments, ReviewAction.REJECT)
        assessment = await self._load(assessment_id)

        fields = TransitionFields(
            validation_state=self._next_state(assessment, ReviewAction.REJECT),
            compliance_tier=ComplianceTier.NON_COMPLIANT,
            reviewer_id=reviewer_id,
            reviewed_at=self._clock(),
            comments=comments,
            manual_tier_override=assessment.manual_tier_override,
        )
        return await self._apply(assessment, ReviewAction.REJECT, fields, locale)

    async def request_clarification(
        self,
        assessment_id: str,
        reviewer_id: str,
        comments: str | None,
        locale: str = DEFAULT_LOCALE,
    ) -> Assessment:
        """
        Ask the vendor for clarifications. Tier and override are unchanged.

        Raises:
            InvalidInputError: comments missing or blank
            NotFoundError: unknown assessment
        """
        comments = _require_comments(comments, ReviewAction.REQUEST_CLARIFICATION)
        assessment = await self._load(assessment_id)

        fields = TransitionFields(
            validation_state=self._next_state(assessment, ReviewAction.REQUEST_CLARIFICATION),
            compliance_tier=assessment.compliance_tier,
            reviewer_id=reviewer_id,
            reviewed_at=self._clock(),
            comments=comments,
            manual_tier_override=assessment.manual_tier_override,
        )
        return await self._apply(assessment, ReviewAction.REQUEST_CLARIFICATION, fields, locale)

    async def _load(self, assessment_id: str) -> Assessment:
        assessment = await self.repository.get_assessment(assessment_id)
        if assessment is None:
            raise NotFoundError("Assessment not found")
        return assessment

    def _next_state(self, assessment: Assessment, action: ReviewAction) -> ValidationState:
        next_state = self.workflow.get_next_state(assessment.validation_state, action)
        if next_state is None:
            raise InvalidInputError(
                f"Cannot {action.value} assessment in state {assessment.validation_state.value}"
            )
        return next_state

    async def _apply(
        self,
        assessment: Assessment,
        action: ReviewAction,
        fields: TransitionFields,
        locale: str,
    ) -> Assessment:
        updated = await self.repository.save_assessment_transition(assessment.id, fields)

        logger.info(
            "assessment_transitioned",
            assessment_id=assessment.id,
            action=action.value,
            from_state=assessment.validation_state.value,
            to_state=updated.validation_state.value,
            compliance_tier=updated.compliance_tier.value,
            reviewer_id=fields.reviewer_id,
        )

        await self._notify(updated, locale)
        return updated

    async def _notify(self, assessment: Assessment, locale: str) -> None:
        if self.notifier is None:
            return

        try:
            vendor = await self.repository.get_vendor(assessment.vendor_id)
            if vendor is None:
                logger.warning("notification_vendor_missing", assessment_id=assessment.id)
                return
            result = await self.notifier.notify(
                vendor, assessment, assessment.validation_state, locale
            )
        except Exception as e:
            logger.error(
                "notification_failed",
                assessment_id=assessment.id,
                error=str(e),
            )
            return

        if not result.success:
            logger.warning(
                "notification_not_delivered",
                assessment_id=assessment.id,
                error=result.error,
                test_mode=result.test_mode,
            )
