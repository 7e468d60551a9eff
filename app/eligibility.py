# app/eligibility.py
"""
Profile gate.

One decision, "may this account run an assessment", used both to route
an assessment selection and to enable/disable assessment entry points.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from app.catalog import AssessmentType, get_assessment, list_assessments
from auth.guard import PREDICTIONS_PATH, PROFILE_PATH, predict_path
from auth.models import Account

PROFILE_INCOMPLETE_NOTICE = "Please complete your profile before making predictions."
UNKNOWN_ASSESSMENT_NOTICE = "Invalid disease type"


def is_eligible(account: Optional[Account]) -> bool:
    """True iff the account has a complete profile."""
    if account is None:
        return False
    return account.profile.is_complete


@dataclass(frozen=True)
class EntryPoint:
    """An assessment card and whether it can be entered."""
    assessment_type: AssessmentType
    title: str
    description: str
    enabled: bool


def entry_points(account: Optional[Account]) -> Tuple[EntryPoint, ...]:
    enabled = is_eligible(account)
    return tuple(
        EntryPoint(
            assessment_type=assessment.type,
            title=assessment.card_title,
            description=assessment.description,
            enabled=enabled,
        )
        for assessment in list_assessments()
    )


@dataclass(frozen=True)
class Navigate:
    """
    Where a selection leads.

    Attributes:
        to: Destination path
        notice: User-visible message to show alongside (None when proceeding)
    """
    to: str
    notice: Optional[str] = None

    @property
    def proceeds(self) -> bool:
        return self.notice is None


def select_assessment(
    account: Optional[Account],
    assessment_type: Union[str, AssessmentType],
) -> Navigate:
    """Route a click on an assessment card."""
    assessment = get_assessment(assessment_type)
    if assessment is None:
        return Navigate(to=PREDICTIONS_PATH, notice=UNKNOWN_ASSESSMENT_NOTICE)
    if not is_eligible(account):
        return Navigate(to=PROFILE_PATH, notice=PROFILE_INCOMPLETE_NOTICE)
    return Navigate(to=predict_path(assessment.type.value))
