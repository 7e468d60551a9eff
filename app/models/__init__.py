"""
Client-side domain models for predictions.
"""

from app.models.prediction import HistoryEntry, PredictionResult, RiskFactor

__all__ = [
    "HistoryEntry",
    "PredictionResult",
    "RiskFactor",
]
