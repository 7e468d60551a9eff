# app/schemas/health.py
"""
Pydantic schemas for the Healify HTTP API.

Every response is wrapped in an Envelope:
    {"success": bool, "statusCode": int, "message": str, "data": ...}

Field names match the wire format (snake_case bodies, camelCase
envelope status code).
"""
from __future__ import annotations

from datetime import date as Date, datetime
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field

Answer = Annotated[int, Field(ge=0, le=100)]


# =============================================================================
# Envelope
# =============================================================================


class Envelope(BaseModel):
    """Standard response wrapper."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    status_code: int = Field(alias="statusCode")
    message: str = ""
    data: Optional[Any] = None


def envelope(status_code: int, message: str, data: Any = None) -> dict:
    """Build a JSON-ready envelope dict."""
    body = Envelope(
        success=200 <= status_code < 300,
        status_code=status_code,
        message=message,
        data=data,
    ).model_dump(by_alias=True)
    if data is None:
        body.pop("data")
    return body


# =============================================================================
# Auth
# =============================================================================


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ProfileSchema(BaseModel):
    """Profile as exchanged on the wire; all measurements optional."""
    age: Optional[float] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    smoking: bool = False
    drinking: bool = False


class ProfileUpdateRequest(BaseModel):
    """Profile update; measurements required and range-checked."""
    age: float = Field(ge=13, le=120)
    weight: float = Field(ge=20, le=200)
    height: float = Field(ge=50, le=300)
    smoking: bool = False
    drinking: bool = False


class AccountSchema(BaseModel):
    id: Union[str, int]
    email: str
    profile: Optional[ProfileSchema] = None


class LoginData(BaseModel):
    token: str = Field(min_length=1)
    user: AccountSchema


# =============================================================================
# Predictions
# =============================================================================


class PredictRequest(BaseModel):
    """Answers keyed by question key."""
    answers: Dict[str, Answer]


class RiskFactorSchema(BaseModel):
    name: str
    impact: int


class PredictionSchema(BaseModel):
    """Scoring result. All fields are required; a partial body is a failure."""
    disease: str
    prediction_percentage: int = Field(ge=0, le=100)
    risk_factors: List[RiskFactorSchema]
    timestamp: datetime


class HistoryEntrySchema(BaseModel):
    disease: str
    date: Date
    result_percentage: int = Field(ge=0, le=100)
