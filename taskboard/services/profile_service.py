"""
Profile business logic service.

Display name and avatar for the current user. Failures raise ProfileError
after a user-facing notification; successes notify too.
"""

import logging
import time
from pathlib import PurePath
from typing import Optional, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models.profile import Profile
from taskboard.repositories.profile_repository import ProfileRepository
from taskboard.services.avatar_storage import AvatarStorageError, LocalAvatarStorage
from taskboard.services.notifications import Notifier

logger = logging.getLogger(__name__)

ALLOWED_AVATAR_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}


class ProfileError(Exception):
    """A profile operation failed; str(exc) is the user-facing message."""


class InvalidAvatarError(ProfileError):
    """The uploaded file is not an accepted image type."""


class ProfileService:
    """Service for profile operations."""
    
    def __init__(self, db: AsyncSession, storage: LocalAvatarStorage, notifier: Notifier):
        self.db = db
        self.repository = ProfileRepository(db)
        self.storage = storage
        self.notifier = notifier

    def _fail(
        self,
        message: str,
        exc: Optional[BaseException] = None,
        error_class: Type[ProfileError] = ProfileError,
    ) -> ProfileError:
        logger.error("%s: %r", message, exc)
        self.notifier.error(message)
        return error_class(message)
    
    async def get_profile(self, user_id: str) -> Profile:
        """Get the user's profile, creating an empty one on first access."""
        profile = await self.repository.get_by_user(user_id)
        if profile is None:
            profile = await self.repository.create(user_id)
            logger.info("Created profile for user %s", user_id)
        return profile
    
    async def update_display_name(self, user_id: str, display_name: str) -> Profile:
        """Change the display name."""
        await self.get_profile(user_id)
        try:
            profile = await self.repository.update(user_id, display_name=display_name)
        except SQLAlchemyError as exc:
            raise self._fail("Failed to update display name", exc) from exc
        
        self.notifier.success("Display name updated!")
        return profile
    
    async def upload_avatar(self, user_id: str, filename: str, content: bytes) -> Profile:
        """
        Store a new avatar image and point the profile at it.
        
        The object is stored at <user_id>/avatar.<ext> (replacing any previous
        one) and the URL carries a millisecond cache buster.
        """
        await self.get_profile(user_id)

        ext = PurePath(filename or "").suffix.lstrip(".").lower()
        if ext not in ALLOWED_AVATAR_EXTENSIONS:
            raise self._fail(
                "Failed to upload avatar",
                ValueError(f"unsupported extension {ext!r}"),
                InvalidAvatarError,
            )

        object_path = f"{user_id}/avatar.{ext}"
        try:
            await self.storage.upload(object_path, content, upsert=True)
        except AvatarStorageError as exc:
            raise self._fail("Failed to upload avatar", exc) from exc

        avatar_url = f"{self.storage.public_url(object_path)}?t={int(time.time() * 1000)}"
        try:
            profile = await self.repository.update(user_id, avatar_url=avatar_url)
        except SQLAlchemyError as exc:
            raise self._fail("Failed to update profile", exc) from exc

        self.notifier.success("Avatar updated!")
        return profile
    
    async def remove_avatar(self, user_id: str) -> Profile:
        """Clear the avatar URL; a profile without an avatar is left as is."""
        profile = await self.get_profile(user_id)
        if not profile.avatar_url:
            return profile

        try:
            profile = await self.repository.update(user_id, avatar_url=None)
        except SQLAlchemyError as exc:
            raise self._fail("Failed to remove avatar", exc) from exc

        self.notifier.success("Avatar removed!")
        return profile
