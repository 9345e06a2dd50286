"""
Questionnaire Tests
===================

Tests for the question catalogue and localization lookups.

Version: 0.1.0
"""

import pytest

from services.vendor_assessment.questionnaire import (
    QUESTION_TEXT,
    QUESTIONS,
    QUESTIONS_BY_ID,
    get_questions,
    resolve_locale,
    tier_label,
    validation_label,
)
from shared.models.assessment import ComplianceTier, ValidationState


class TestCatalogue:
    """Tests for the immutable question table."""

    def test_nine_questions_five_sections(self) -> None:
        assert len(QUESTIONS) == 9
        assert {q.section for q in QUESTIONS} == {1, 2, 3, 4, 5}

    def test_weights(self) -> None:
        assert QUESTIONS_BY_ID["account_deactivation"].weight == 1
        assert sum(q.weight for q in QUESTIONS) == 17

    def test_ids_stable_across_locales(self) -> None:
        ids = {q.id for q in QUESTIONS}
        for texts in QUESTION_TEXT.values():
            assert set(texts) == ids

    def test_table_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            QUESTIONS_BY_ID["new"] = QUESTIONS[0]  # type: ignore[index]


class TestLocalization:
    """Tests for locale resolution and labels."""

    @pytest.mark.parametrize(
        "requested,expected",
        [
            (None, "fr"),
            ("", "fr"),
            ("en", "en"),
            ("EN", "en"),
            ("en-US,en;q=0.9", "en"),
            ("de-DE", "fr"),
        ],
    )
    def test_resolve_locale(self, requested, expected) -> None:
        assert resolve_locale(requested) == expected

    def test_questions_follow_locale(self) -> None:
        fr = get_questions("fr")
        en = get_questions("en")

        assert [q.id for q in fr] == [q.id for q in en]
        assert en[0].section_title == "Authentication and Access Control"
        assert fr[0].text != en[0].text

    def test_labels(self) -> None:
        assert tier_label(ComplianceTier.COMPLIANT, "fr") == "Conforme"
        assert tier_label(ComplianceTier.NON_COMPLIANT, "en") == "Non-Compliant"
        assert validation_label(ValidationState.REJECTED, "fr") == "Rejeté"
