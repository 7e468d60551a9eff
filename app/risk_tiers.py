# app/risk_tiers.py
"""
Risk tier classification.

Maps a risk percentage to one of four ordered tiers. This threshold
table is the only place tier boundaries are defined; result display and
history display both classify through tier_for().

Thresholds:
- LOW:       p < 25
- MODERATE:  25 <= p < 50
- HIGH:      50 <= p < 75
- VERY_HIGH: p >= 75
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from app.errors import ValidationError


# =============================================================================
# Tier Enum
# =============================================================================


class RiskTier(str, Enum):
    """Risk tiers, lowest first."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"

    @property
    def label(self) -> str:
        return TIER_LABELS[self]


TIER_LABELS = {
    RiskTier.LOW: "Low",
    RiskTier.MODERATE: "Moderate",
    RiskTier.HIGH: "High",
    RiskTier.VERY_HIGH: "Very High",
}

# (exclusive upper bound, tier), checked in order
_THRESHOLDS: Tuple[Tuple[int, RiskTier], ...] = (
    (25, RiskTier.LOW),
    (50, RiskTier.MODERATE),
    (75, RiskTier.HIGH),
)


def tier_for(percentage: float) -> RiskTier:
    """
    Classify a risk percentage.

    Raises:
        ValidationError: If percentage is outside [0, 100]
    """
    if isinstance(percentage, bool) or not 0 <= percentage <= 100:
        raise ValidationError(f"Risk percentage out of range: {percentage}")

    for upper, tier in _THRESHOLDS:
        if percentage < upper:
            return tier
    return RiskTier.VERY_HIGH


# =============================================================================
# Recommendations
# =============================================================================


LOW_RISK_STEPS: Tuple[str, ...] = (
    "Continue maintaining your healthy lifestyle",
    "Schedule regular checkups with your healthcare provider",
    "Monitor any changes in symptoms",
)

ELEVATED_RISK_STEPS: Tuple[str, ...] = (
    "Consult with a healthcare professional about your symptoms",
    "Consider lifestyle modifications to reduce risk factors",
    "Schedule appropriate medical screenings",
    "Keep track of your symptoms and any changes",
)


def recommendations(tier: RiskTier) -> Tuple[str, ...]:
    """Next steps shown with a result."""
    if tier == RiskTier.LOW:
        return LOW_RISK_STEPS
    return ELEVATED_RISK_STEPS


# =============================================================================
# Risk factor severity
# =============================================================================


class FactorSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def factor_severity(impact: int) -> FactorSeverity:
    """Severity band for a single risk factor's impact."""
    if impact > 40:
        return FactorSeverity.HIGH
    if impact > 20:
        return FactorSeverity.MEDIUM
    return FactorSeverity.LOW


@dataclass(frozen=True)
class TierSummary:
    """Classification bundle for rendering a percentage."""
    percentage: int
    tier: RiskTier
    steps: Tuple[str, ...]

    @property
    def headline(self) -> str:
        return f"{self.tier.label} Risk"


def summarize(percentage: int) -> TierSummary:
    tier = tier_for(percentage)
    return TierSummary(percentage=percentage, tier=tier, steps=recommendations(tier))
