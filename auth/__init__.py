# auth/__init__.py
"""
Client authentication state.

Provides:
- Account / Profile / Session models
- SessionStore: login, logout, forced invalidation, profile merges
- Route guard for protected destinations
"""

from auth.models import Account, Profile, Session
from auth.store import SessionStore
from auth.guard import (
    GuardDecision,
    Pending,
    Redirect,
    Render,
    evaluate,
    post_login_destination,
    resolve,
)

__all__ = [
    "Account",
    "Profile",
    "Session",
    "SessionStore",
    "GuardDecision",
    "Pending",
    "Redirect",
    "Render",
    "evaluate",
    "post_login_destination",
    "resolve",
]
