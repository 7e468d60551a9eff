# auth/guard.py
"""
Route guard for protected screens.

Decides, from the session store alone, whether a destination renders,
redirects to sign-in, or waits for the startup session check.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from auth.store import SessionStore

SIGN_IN_PATH = "/login"
REGISTER_PATH = "/register"
HOME_PATH = "/"
DEFAULT_LANDING_PATH = "/dashboard"
PROFILE_PATH = "/profile"
PREDICTIONS_PATH = "/predictions"

PUBLIC_PATHS = frozenset({HOME_PATH, SIGN_IN_PATH, REGISTER_PATH})
PROTECTED_PATHS = frozenset({DEFAULT_LANDING_PATH, PROFILE_PATH, PREDICTIONS_PATH})
_PREDICT_PATH_RE = re.compile(r"^/predict/(?P<assessment_type>[^/]+)$")


class GuardOutcome(str, Enum):
    RENDER = "render"
    REDIRECT = "redirect"
    PENDING = "pending"


@dataclass(frozen=True)
class Render:
    destination: str
    outcome: GuardOutcome = GuardOutcome.RENDER


@dataclass(frozen=True)
class Redirect:
    """
    Send the user elsewhere.

    Attributes:
        to: Where to go
        remembered_from: Originally requested destination, for the
                         post-login return (None when not applicable)
    """
    to: str
    remembered_from: Optional[str] = None
    outcome: GuardOutcome = GuardOutcome.REDIRECT


@dataclass(frozen=True)
class Pending:
    """Startup check still running: show a neutral loading state."""
    destination: str
    outcome: GuardOutcome = GuardOutcome.PENDING


GuardDecision = Union[Render, Redirect, Pending]


def evaluate(store: SessionStore, destination: str) -> GuardDecision:
    """
    Guard a protected destination.

    Never redirects while the startup check is running, so protected
    content is never shown before it completes.
    """
    if store.is_initializing:
        return Pending(destination=destination)
    if store.is_authenticated:
        return Render(destination=destination)
    return Redirect(to=SIGN_IN_PATH, remembered_from=destination)


def post_login_destination(remembered_from: Optional[str]) -> str:
    """Where to go after a successful login."""
    if remembered_from and remembered_from not in (SIGN_IN_PATH, REGISTER_PATH):
        return remembered_from
    return DEFAULT_LANDING_PATH


def predict_path(assessment_type: str) -> str:
    return f"/predict/{assessment_type}"


def parse_predict_path(destination: str) -> Optional[str]:
    """Return the assessment type for /predict/<type>, else None."""
    match = _PREDICT_PATH_RE.match(destination)
    return match.group("assessment_type") if match else None


def is_protected(destination: str) -> bool:
    return destination in PROTECTED_PATHS or parse_predict_path(destination) is not None


def resolve(store: SessionStore, destination: str) -> GuardDecision:
    """
    Route table plus guard.

    Public paths always render, protected paths go through evaluate(),
    anything else is sent home.
    """
    if destination in PUBLIC_PATHS:
        return Render(destination=destination)
    if is_protected(destination):
        return evaluate(store, destination)
    return Redirect(to=HOME_PATH)
