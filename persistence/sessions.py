# persistence/sessions.py
"""
Durable storage for the client session.

The session store mirrors login/logout/profile changes here when a
storage backend is configured, and reads it back once at startup.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional, Tuple

from auth.models import Account
from persistence.db import PathLike, get_db, init_db

_logger = logging.getLogger(__name__)


class SessionStorage(ABC):
    """Contract for durable client session storage."""

    @abstractmethod
    def load(self) -> Optional[Tuple[str, Account]]:
        """Return (credential, account) if a session was saved, else None."""

    @abstractmethod
    def save(self, credential: str, account: Account) -> None:
        """Persist the current session, replacing any previous one."""

    @abstractmethod
    def clear(self) -> None:
        """Remove any saved session."""


class SqliteSessionStorage(SessionStorage):
    """Session storage backed by the client SQLite database.

    Uses the default database unless given an explicit `db_path`.
    """

    def __init__(self, db_path: Optional[PathLike] = None):
        self.db_path = db_path

    def load(self) -> Optional[Tuple[str, Account]]:
        init_db(self.db_path)

        with get_db(self.db_path) as conn:
            row = conn.execute(
                "SELECT credential, account_json FROM client_session WHERE slot = 1"
            ).fetchone()

        if not row:
            return None

        account = Account.from_dict(json.loads(row["account_json"]))
        return row["credential"], account

    def save(self, credential: str, account: Account) -> None:
        init_db(self.db_path)

        with get_db(self.db_path) as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO client_session (slot, credential, account_json, saved_at)
                VALUES (1, ?, ?, ?)
                """,
                (
                    credential,
                    json.dumps(account.to_dict()),
                    datetime.now(timezone.utc).isoformat(),
                ),
            )

        _logger.debug(f"Saved client session for {account.email}")

    def clear(self) -> None:
        init_db(self.db_path)

        with get_db(self.db_path) as conn:
            conn.execute("DELETE FROM client_session")
