# app/models/prediction.py
"""
Prediction results and history entries returned by the remote service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date as Date, datetime, timezone
from typing import Tuple

from app.catalog import AssessmentType


@dataclass(frozen=True)
class RiskFactor:
    name: str
    impact: int


@dataclass(frozen=True)
class PredictionResult:
    """
    Outcome of one scoring request.

    Attributes:
        disease: Assessment type that was scored
        percentage: Risk percentage (0-100)
        risk_factors: Contributing factors, highest impact first
        timestamp: When the service produced the result
    """
    disease: AssessmentType
    percentage: int
    risk_factors: Tuple[RiskFactor, ...] = field(default_factory=tuple)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        ordered = tuple(sorted(self.risk_factors, key=lambda f: f.impact, reverse=True))
        object.__setattr__(self, "risk_factors", ordered)

    @property
    def top_factor(self):
        return self.risk_factors[0] if self.risk_factors else None


@dataclass(frozen=True)
class HistoryEntry:
    disease: AssessmentType
    date: Date
    percentage: int
