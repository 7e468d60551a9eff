# auth/store.py
"""
Client session store.

Holds who (if anyone) is logged in, their bearer credential and their
profile snapshot. One instance is created per running client and passed
to the consumers that need it (route guard, workflows, account flows).

Handles:
- One-time startup recovery (optional durable storage)
- Login / logout / forced invalidation
- Profile merges
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional

from app.errors import InvalidStateError
from auth.models import Account, Profile, Session

if TYPE_CHECKING:
    from persistence.sessions import SessionStorage

_logger = logging.getLogger(__name__)


class SessionStore:
    """
    Single mutable session cell.

    All mutations are synchronous; callers never observe a partially
    applied update.
    """

    def __init__(self, storage: Optional[SessionStorage] = None):
        """
        Initialize session store.

        Args:
            storage: Durable storage to recover from and mirror to.
                     None keeps the session in memory only.
        """
        self._storage = storage
        self._credential: Optional[str] = None
        self._account: Optional[Account] = None
        self._initializing = True

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    @property
    def is_initializing(self) -> bool:
        return self._initializing

    @property
    def is_authenticated(self) -> bool:
        return bool(self._credential) and self._account is not None

    @property
    def credential(self) -> Optional[str]:
        return self._credential

    @property
    def account(self) -> Optional[Account]:
        return self._account

    def snapshot(self) -> Session:
        """Immutable copy of the current state."""
        return Session(
            credential=self._credential,
            account=self._account,
            is_initializing=self._initializing,
        )

    def is_profile_complete(self) -> bool:
        """True iff logged in and age, weight and height are all set."""
        if self._account is None:
            return False
        return self._account.profile.is_complete

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def initialize(self) -> None:
        """
        Run the startup session check.

        Never raises: a storage failure is logged and treated as
        "no prior session". Always ends with is_initializing False.
        """
        if not self._initializing:
            return

        try:
            if self._storage is not None:
                recovered = self._storage.load()
                if recovered is not None:
                    credential, account = recovered
                    if credential:
                        self._credential = credential
                        self._account = account
                        _logger.info(f"Recovered session for {account.email}")
        except Exception as e:
            self._credential = None
            self._account = None
            _logger.warning(f"Error checking existing session: {e}")
        finally:
            self._initializing = False

    def login(self, account: Account, credential: str) -> None:
        """
        Store an authenticated session.

        No validation happens here; the remote service already accepted
        the credentials.
        """
        if not credential:
            raise InvalidStateError("Cannot log in without a credential")

        self._account = account
        self._credential = credential
        self._mirror()
        _logger.info(f"Logged in: {account.email}")

    def logout(self) -> None:
        """Clear the session. Idempotent."""
        was_authenticated = self.is_authenticated
        self._credential = None
        self._account = None

        if self._storage is not None:
            try:
                self._storage.clear()
            except Exception as e:
                _logger.warning(f"Failed to clear stored session: {e}")

        if was_authenticated:
            _logger.info("Logged out")

    def invalidate(self, reason: str = "credential rejected") -> None:
        """Forced logout after the remote service rejected the credential."""
        if self.is_authenticated:
            _logger.warning(f"Session invalidated: {reason}")
        self.logout()

    def update_profile(self, partial: Mapping[str, Any]) -> Profile:
        """
        Shallow-merge `partial` into the account profile.

        Returns:
            The merged profile

        Raises:
            InvalidStateError: If nobody is logged in
            ValidationError: If `partial` names unknown profile fields
        """
        if self._account is None:
            raise InvalidStateError("Cannot update profile while logged out")

        profile = self._account.profile.merged(partial)
        self._account = self._account.with_profile(profile)
        self._mirror()
        return profile

    def _mirror(self) -> None:
        """Copy the current session to durable storage, if configured."""
        if self._storage is None or not self.is_authenticated:
            return
        try:
            self._storage.save(self._credential, self._account)
        except Exception as e:
            _logger.warning(f"Failed to persist session: {e}")
