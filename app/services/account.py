"""
Account flows: sign-in, registration, profile maintenance, history.

Each flow validates locally first (no network call on bad input), then
calls the remote service, updates the session store, and records one
notification for the outcome. An UnauthorizedError from any call
invalidates the session before it propagates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from app.errors import HealifyError, UnauthorizedError, ValidationError
from app.models import HistoryEntry
from app.notifications import Notifier
from app.remote.base import HealthService
from app.risk_tiers import RiskTier, tier_for
from auth.guard import SIGN_IN_PATH, post_login_destination
from auth.models import Profile
from auth.store import SessionStore
from auth.validation import (
    FORM_ERROR_MESSAGE,
    validate_login_form,
    validate_profile_form,
    validate_registration_form,
)

_logger = logging.getLogger(__name__)

LOGIN_SUCCESS_MESSAGE = "Login successful! Welcome back."
REGISTER_SUCCESS_MESSAGE = "Registration successful! Please log in."
PROFILE_SUCCESS_MESSAGE = "Profile updated successfully!"
PROFILE_FAILED_MESSAGE = "Failed to update profile. Please try again."
HISTORY_FAILED_MESSAGE = "Failed to load prediction history"
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please log in again."


@dataclass(frozen=True)
class HistoryRow:
    """History entry paired with its risk tier."""
    entry: HistoryEntry
    tier: RiskTier


class AccountService:
    """Account-level actions against the session store and remote service."""

    def __init__(self, store: SessionStore, service: HealthService, notifier: Notifier):
        self._store = store
        self._service = service
        self._notifier = notifier

    async def login(
        self,
        email: str,
        password: str,
        remembered_from: Optional[str] = None,
    ) -> str:
        """
        Sign in and return the destination to navigate to.

        Raises:
            ValidationError: Form invalid (no call made)
            InvalidCredentialsError / ServiceError: Service refused
        """
        try:
            validate_login_form(email, password)
        except ValidationError:
            self._notifier.error(FORM_ERROR_MESSAGE)
            raise

        try:
            result = await self._service.login(email.strip(), password)
        except HealifyError as e:
            self._notifier.error(e.message)
            raise

        self._store.login(result.account, result.credential)
        self._notifier.success(LOGIN_SUCCESS_MESSAGE)
        return post_login_destination(remembered_from)

    async def register(self, email: str, password: str, confirm_password: str) -> str:
        """
        Create an account and return the sign-in destination.

        Raises:
            ValidationError: Form invalid (no call made)
            RegistrationRejectedError / ServiceError: Service refused
        """
        try:
            validate_registration_form(email, password, confirm_password)
        except ValidationError:
            self._notifier.error(FORM_ERROR_MESSAGE)
            raise

        try:
            await self._service.register(email.strip(), password)
        except HealifyError as e:
            self._notifier.error(e.message)
            raise

        self._notifier.success(REGISTER_SUCCESS_MESSAGE)
        return SIGN_IN_PATH

    async def save_profile(
        self,
        age: Any,
        weight: Any,
        height: Any,
        smoking: bool = False,
        drinking: bool = False,
    ) -> Profile:
        """
        Validate and store the profile, remotely then in the session.

        Raises:
            ValidationError: Form invalid (no call made) or rejected remotely
            UnauthorizedError: Credential rejected; session invalidated
            ServiceError: Any other failure
        """
        credential = self._require_credential()

        try:
            values = validate_profile_form(age, weight, height)
        except ValidationError:
            self._notifier.error(FORM_ERROR_MESSAGE)
            raise

        profile = Profile(smoking=bool(smoking), drinking=bool(drinking), **values)

        try:
            stored = await self._service.update_profile(credential, profile)
        except HealifyError as e:
            self._fail(e, PROFILE_FAILED_MESSAGE)
            raise

        merged = self._store.update_profile(stored.to_dict())
        self._notifier.success(PROFILE_SUCCESS_MESSAGE)
        return merged

    async def refresh_profile(self) -> Profile:
        """Pull the stored profile and merge it into the session."""
        credential = self._require_credential()
        try:
            profile = await self._service.get_profile(credential)
        except HealifyError as e:
            self._fail(e, "Failed to load profile.")
            raise
        return self._store.update_profile(profile.to_dict())

    async def load_history(self) -> List[HistoryRow]:
        """
        Fetch prediction history with tiers.

        A failure is reported through one notification and yields an
        empty list; an UnauthorizedError still propagates.
        """
        credential = self._require_credential()
        try:
            entries = await self._service.get_history(credential)
        except UnauthorizedError as e:
            self._fail(e, HISTORY_FAILED_MESSAGE)
            raise
        except HealifyError as e:
            self._fail(e, HISTORY_FAILED_MESSAGE)
            return []

        return [HistoryRow(entry=entry, tier=tier_for(entry.percentage)) for entry in entries]

    def logout(self) -> str:
        self._store.logout()
        return SIGN_IN_PATH

    def _require_credential(self) -> str:
        credential = self._store.credential
        if not credential:
            self._notifier.error(SESSION_EXPIRED_MESSAGE)
            raise UnauthorizedError(SESSION_EXPIRED_MESSAGE)
        return credential

    def _fail(self, error: HealifyError, fallback_message: str) -> None:
        """One notification per failure; Unauthorized also ends the session."""
        if isinstance(error, UnauthorizedError):
            self._store.invalidate(error.message)
            self._notifier.error(SESSION_EXPIRED_MESSAGE)
            return
        if isinstance(error, ValidationError):
            self._notifier.error(error.message)
            return
        _logger.warning(f"{fallback_message} ({error.message})")
        self._notifier.error(fallback_message)
