"""
Compliance Tier Derivation
==========================

Maps a 0-100 score onto a compliance tier.

Tiers (lower bounds inclusive):
- COMPLIANT: score >= 80
- IN_PROGRESS: 50 <= score < 80
- NON_COMPLIANT: score < 50

Version: 0.1.0
"""

from dataclasses import dataclass

from shared.models.assessment import ComplianceTier


@dataclass(frozen=True)
class TierThresholds:
    """Lower bound of each tier above NON_COMPLIANT."""

    compliant: int = 80
    in_progress: int = 50

    def __post_init__(self) -> None:
        if not 0 <= self.in_progress <= self.compliant <= 100:
            raise ValueError("Thresholds must satisfy 0 <= in_progress <= compliant <= 100")


DEFAULT_THRESHOLDS = TierThresholds()


def derive_status(score: int, thresholds: TierThresholds = DEFAULT_THRESHOLDS) -> ComplianceTier:
    """Compliance tier for a score."""
    if score >= thresholds.compliant:
        return ComplianceTier.COMPLIANT
    if score >= thresholds.in_progress:
        return ComplianceTier.IN_PROGRESS
    return ComplianceTier.NON_COMPLIANT
