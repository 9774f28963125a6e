"""
Identity provider seen by the task store.

Holds the current user id (or None) and notifies listeners when it changes.
"""

import logging
from typing import Awaitable, Callable, List, Optional

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Optional[str]], Awaitable[None]]


class IdentityProvider:
    """Current-user holder with async change notifications."""

    def __init__(self, user_id: Optional[str] = None) -> None:
        self._user_id = user_id
        self._listeners: List[IdentityListener] = []

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def set_user(self, user_id: Optional[str]) -> None:
        """Change the current user and notify listeners (no-op if unchanged)."""
        if user_id == self._user_id:
            return
        logger.info("Identity changed: %s -> %s", self._user_id, user_id)
        self._user_id = user_id
        for listener in list(self._listeners):
            await listener(user_id)

    async def sign_out(self) -> None:
        await self.set_user(None)
