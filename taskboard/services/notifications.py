"""
Transient user-visible notifications (toasts).

The task store and profile service push here; the HTTP layer drains them.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, List

from taskboard.utils.time import utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    level: str  # "success" or "error"
    message: str
    created_at: datetime = field(default_factory=utc_now)


class Notifier:
    """Bounded queue of pending notifications for one user session."""

    def __init__(self, backlog: int = 50) -> None:
        self._pending: Deque[Notification] = deque(maxlen=backlog)

    def success(self, message: str) -> None:
        self._push(Notification("success", message))

    def error(self, message: str) -> None:
        self._push(Notification("error", message))

    def _push(self, notification: Notification) -> None:
        logger.debug("Notify %s: %s", notification.level, notification.message)
        self._pending.append(notification)

    def pending(self) -> List[Notification]:
        return list(self._pending)

    def drain(self) -> List[Notification]:
        """Return and forget every pending notification, oldest first."""
        items = list(self._pending)
        self._pending.clear()
        return items
