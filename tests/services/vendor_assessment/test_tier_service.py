"""
Tier Service Tests
==================

Tests for score to compliance tier derivation.

Version: 0.1.0
"""

import pytest

from services.vendor_assessment.services.tier import TierThresholds, derive_status
from shared.models.assessment import ComplianceTier


class TestDeriveStatus:
    """Tests for derive_status."""

    @pytest.mark.parametrize(
        "score,expected",
        [
            (100, ComplianceTier.COMPLIANT),
            (80, ComplianceTier.COMPLIANT),
            (79, ComplianceTier.IN_PROGRESS),
            (50, ComplianceTier.IN_PROGRESS),
            (49, ComplianceTier.NON_COMPLIANT),
            (0, ComplianceTier.NON_COMPLIANT),
        ],
    )
    def test_default_boundaries(self, score: int, expected: ComplianceTier) -> None:
        assert derive_status(score) == expected

    def test_custom_thresholds(self) -> None:
        thresholds = TierThresholds(compliant=90, in_progress=60)

        assert derive_status(85, thresholds) == ComplianceTier.IN_PROGRESS
        assert derive_status(90, thresholds) == ComplianceTier.COMPLIANT
        assert derive_status(59, thresholds) == ComplianceTier.NON_COMPLIANT

    def test_thresholds_must_be_ordered(self) -> None:
        with pytest.raises(ValueError):
            TierThresholds(compliant=40, in_progress=60)
