"""
Compliance Score Calculation
============================

Weighted questionnaire scoring.

Rules:
- "yes" earns the question's weight
- "no", a missing answer or an unrecognized value earns nothing but counts
  towards the total weight
- "na" (not applicable) is excluded from both sides
- nothing assessable scores 0

Version: 0.1.0
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from services.vendor_assessment.questionnaire import Question
from shared.models.assessment import Answer


@dataclass
class ScoreBreakdown:
    """Intermediate sums behind a score."""

    achieved_weight: int = 0
    total_weight: int = 0

    # Counts
    yes: int = 0
    no: int = 0
    not_applicable: int = 0
    unanswered: int = 0

    @property
    def score(self) -> int:
        """Percentage of achieved weight, rounded half up."""
        if self.total_weight == 0:
            return 0
        return (200 * self.achieved_weight + self.total_weight) // (2 * self.total_weight)


def calculate_breakdown(
    answers: Mapping[str, str | None],
    questions: Iterable[Question],
) -> ScoreBreakdown:
    """
    Sum achieved and total weight over a question set.

    Args:
        answers: Question ID to answer; partial sets are allowed
        questions: Questions to score against

    Returns:
        ScoreBreakdown with weights and per-answer counts
    """
    breakdown = ScoreBreakdown()

    for question in questions:
        answer = answers.get(question.id)

        if answer == Answer.NOT_APPLICABLE:
            breakdown.not_applicable += 1
            continue

        breakdown.total_weight += question.weight

        if answer == Answer.YES:
            breakdown.achieved_weight += question.weight
            breakdown.yes += 1
        elif answer is None or answer == "":
            breakdown.unanswered += 1
        else:
            breakdown.no += 1

    return breakdown


def compute_score(
    answers: Mapping[str, str | None],
    questions: Iterable[Question],
) -> int:
    """
    Score an answer set from 0 to 100.

    Example:
        >>> qs = [Question("a", 1, 2), Question("b", 1, 2), Question("c", 1, 1)]
        >>> compute_score({"a": "yes", "b": "no", "c": "na"}, qs)
        50
    """
    return calculate_breakdown(answers, questions).score
