# persistence/__init__.py
"""
Persistence layer for the client.

Provides SQLite-backed storage for:
- The durable copy of the client session (optional)
"""

from persistence.db import get_db, init_db, close_db
from persistence.sessions import SessionStorage, SqliteSessionStorage

__all__ = [
    "get_db",
    "init_db",
    "close_db",
    "SessionStorage",
    "SqliteSessionStorage",
]
