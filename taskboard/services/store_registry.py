"""
One task store per authenticated user.

The registry lives for the process. A user's store lives until the user
signs out, stays idle for longer than idle_ttl seconds, or is the least
recently used one when more than max_sessions are open.
"""

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, List, Optional

from taskboard.repositories.task_record_store import TaskRecordStore
from taskboard.services.identity import IdentityProvider
from taskboard.services.notifications import Notifier
from taskboard.services.task_store import TaskStore

logger = logging.getLogger(__name__)


@dataclass
class UserSession:
    identity: IdentityProvider
    notifier: Notifier
    store: TaskStore
    last_seen: float = 0.0


class TaskStoreRegistry:
    """Creates, caches and tears down per-user task stores."""

    def __init__(
        self,
        records: TaskRecordStore,
        notification_backlog: int = 50,
        idle_ttl: Optional[float] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._records = records
        self._backlog = notification_backlog
        self._idle_ttl = idle_ttl
        self._max_sessions = max_sessions
        self._clock = clock
        # Least recently used first.
        self._sessions: "OrderedDict[str, UserSession]" = OrderedDict()

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    @property
    def records(self) -> TaskRecordStore:
        return self._records

    async def open(self, user_id: str) -> UserSession:
        """Return the user's session, creating and loading its store on first use."""
        now = self._clock()
        await self.evict_idle(now)

        session = self._sessions.get(user_id)
        if session is not None:
            session.last_seen = now
            self._sessions.move_to_end(user_id)
            return session

        notifier = Notifier(backlog=self._backlog)
        identity = IdentityProvider()
        store = TaskStore(self._records, notifier)
        await store.bind(identity)

        session = UserSession(identity=identity, notifier=notifier, store=store, last_seen=now)
        self._sessions[user_id] = session
        logger.info("Opened task session for user %s", user_id)

        if self._max_sessions is not None:
            while len(self._sessions) > self._max_sessions:
                oldest = next(iter(self._sessions))
                logger.info("Evicting least recently used task session for user %s", oldest)
                await self.close(oldest)

        # Identity becoming available triggers the initial load.
        await identity.set_user(user_id)
        return session

    async def evict_idle(self, now: Optional[float] = None) -> List[str]:
        """Close every session unused for longer than idle_ttl; returns their user ids."""
        if self._idle_ttl is None:
            return []
        if now is None:
            now = self._clock()

        expired = [
            user_id for user_id, session in self._sessions.items()
            if now - session.last_seen > self._idle_ttl
        ]
        for user_id in expired:
            logger.info("Evicting idle task session for user %s", user_id)
            await self.close(user_id)
        return expired

    async def get_store(self, user_id: str) -> TaskStore:
        return (await self.open(user_id)).store

    async def get_notifier(self, user_id: str) -> Notifier:
        return (await self.open(user_id)).notifier

    async def close(self, user_id: str) -> bool:
        """Sign the user out of their store and forget it."""
        session: Optional[UserSession] = self._sessions.pop(user_id, None)
        if session is None:
            return False
        await session.identity.sign_out()
        session.store.unbind()
        logger.info("Closed task session for user %s", user_id)
        return True
