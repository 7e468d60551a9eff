# persistence/db.py
"""
SQLite connection and schema management for client-side storage.

Holds the durable copy of the client session when session persistence
is enabled. The default database path is configurable via
HEALIFY_DB_PATH; every helper also accepts an explicit path so an
application can point its storage at the file named in its config.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Optional, Set, Union

_logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "healify.db"
DB_PATH = Path(os.environ.get("HEALIFY_DB_PATH", str(DEFAULT_DB_PATH)))

PathLike = Union[str, Path]

# One connection per thread and path
_local = threading.local()
_init_lock = threading.Lock()
_initialized: Set[str] = set()


def _resolve(path: Optional[PathLike]) -> Path:
    return Path(path) if path is not None else DB_PATH


def _connections() -> Dict[str, sqlite3.Connection]:
    if not hasattr(_local, "connections"):
        _local.connections = {}
    return _local.connections


def _get_connection(path: Optional[PathLike] = None) -> sqlite3.Connection:
    """Get thread-local database connection for a path."""
    db_path = _resolve(path)
    key = str(db_path)
    connections = _connections()

    if key not in connections:
        if key != ":memory:":
            db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(
            key,
            timeout=30.0,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        connections[key] = conn

    return connections[key]


@contextmanager
def get_db(path: Optional[PathLike] = None):
    """
    Get database connection context manager.

    Usage:
        with get_db() as conn:
            cursor = conn.execute("SELECT ...")
    """
    conn = _get_connection(path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise


def init_db(path: Optional[PathLike] = None) -> None:
    """
    Initialize database schema.

    Creates tables if they don't exist. Idempotent per path.
    """
    key = str(_resolve(path))

    with _init_lock:
        if key in _initialized:
            return

        with get_db(path) as conn:
            # Single-row table: slot is always 1
            conn.execute("""
                CREATE TABLE IF NOT EXISTS client_session (
                    slot INTEGER PRIMARY KEY CHECK (slot = 1),
                    credential TEXT NOT NULL,
                    account_json TEXT NOT NULL,
                    saved_at TEXT NOT NULL
                )
            """)

            _logger.info(f"Client database initialized at {key}")
            _initialized.add(key)


def close_db() -> None:
    """Close this thread's database connections."""
    connections = _connections()
    for conn in connections.values():
        conn.close()
    connections.clear()


def reset_db(path: Optional[PathLike] = None) -> None:
    """Reset database (for testing). Drops all tables."""
    key = str(_resolve(path))

    with _init_lock:
        with get_db(path) as conn:
            conn.execute("DROP TABLE IF EXISTS client_session")
        _initialized.discard(key)


def get_db_path() -> Path:
    """Get the default database file path."""
    return DB_PATH
