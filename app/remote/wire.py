"""
Conversion between wire schemas and domain models.

Parsing failures surface as pydantic ValidationError or ValueError; the
HTTP client converts them to ServiceError at its boundary.
"""

from typing import Any, List

from app.catalog import AssessmentType
from app.models import HistoryEntry, PredictionResult, RiskFactor
from app.schemas.health import (
    AccountSchema,
    HistoryEntrySchema,
    PredictionSchema,
    ProfileSchema,
)
from auth.models import Account, Profile


def profile_from_wire(data: Any) -> Profile:
    if data is None:
        return Profile()
    schema = ProfileSchema.model_validate(data)
    return Profile(**schema.model_dump())


def profile_to_wire(profile: Profile) -> dict:
    return ProfileSchema(**profile.to_dict()).model_dump()


def account_from_wire(data: Any) -> Account:
    schema = AccountSchema.model_validate(data)
    profile = Profile(**schema.profile.model_dump()) if schema.profile else Profile()
    return Account(id=str(schema.id), email=schema.email.lower().strip(), profile=profile)


def account_to_wire(account: Account) -> dict:
    return {
        "id": account.id,
        "email": account.email,
        "profile": profile_to_wire(account.profile),
    }


def prediction_from_wire(data: Any) -> PredictionResult:
    schema = PredictionSchema.model_validate(data)
    return PredictionResult(
        disease=AssessmentType(schema.disease),
        percentage=schema.prediction_percentage,
        risk_factors=tuple(RiskFactor(name=f.name, impact=f.impact) for f in schema.risk_factors),
        timestamp=schema.timestamp,
    )


def prediction_to_wire(result: PredictionResult) -> dict:
    return {
        "disease": result.disease.value,
        "prediction_percentage": result.percentage,
        "risk_factors": [
            {"name": f.name, "impact": f.impact} for f in result.risk_factors
        ],
        "timestamp": result.timestamp.isoformat(),
    }


def history_from_wire(data: Any) -> List[HistoryEntry]:
    if not isinstance(data, list):
        raise ValueError("History payload must be a list")
    entries = []
    for item in data:
        schema = HistoryEntrySchema.model_validate(item)
        entries.append(
            HistoryEntry(
                disease=AssessmentType(schema.disease),
                date=schema.date,
                percentage=schema.result_percentage,
            )
        )
    return entries


def history_to_wire(entries: List[HistoryEntry]) -> list:
    return [
        {
            "disease": entry.disease.value,
            "date": entry.date.isoformat(),
            "result_percentage": entry.percentage,
        }
        for entry in entries
    ]
