# app/notifications.py
"""
Transient user notifications.

Every user-facing success or failure produces exactly one Notification.
The store keeps the most recent ones so a UI layer can drain and display
them; tests read them directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

_logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "level": self.level.value,
            "message": self.message,
            "createdAt": self.created_at,
        }


class Notifier:
    """
    In-memory notification queue.

    Items are kept in chronological order; the oldest are evicted once
    max_items is exceeded.
    """

    def __init__(self, max_items: int = 50):
        self._items: List[Notification] = []
        self._max_items = max_items

    def notify(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(level=level, message=message)
        self._items.append(notification)

        while len(self._items) > self._max_items:
            self._items.pop(0)

        log_level = logging.WARNING if level == NotificationLevel.ERROR else logging.DEBUG
        _logger.log(log_level, f"[{level.value}] {message}")
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(NotificationLevel.SUCCESS, message)

    def info(self, message: str) -> Notification:
        return self.notify(NotificationLevel.INFO, message)

    def error(self, message: str) -> Notification:
        return self.notify(NotificationLevel.ERROR, message)

    def items(self, level: Optional[NotificationLevel] = None) -> List[Notification]:
        if level is None:
            return list(self._items)
        return [n for n in self._items if n.level == level]

    def drain(self) -> List[Notification]:
        """Return and remove all pending notifications."""
        items, self._items = self._items, []
        return items

    def clear(self) -> None:
        self._items.clear()

    def count(self, level: Optional[NotificationLevel] = None) -> int:
        return len(self.items(level))
