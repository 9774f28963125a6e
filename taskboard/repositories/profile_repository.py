"""
Profile repository - database operations for Profile.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models.profile import Profile
from taskboard.utils.time import utc_now


class ProfileRepository:
    """Repository for Profile database operations."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def get_by_user(self, user_id: str) -> Optional[Profile]:
        """Get the profile owned by a user."""
        result = await self.db.execute(
            select(Profile).where(Profile.user_id == user_id)
        )
        return result.scalar_one_or_none()
    
    async def create(self, user_id: str, display_name: Optional[str] = None) -> Profile:
        """Create an empty profile for a user."""
        profile = Profile(user_id=user_id, display_name=display_name)
        self.db.add(profile)
        await self.db.flush()
        await self.db.refresh(profile)
        return profile
    
    async def update(self, user_id: str, **fields) -> Optional[Profile]:
        """Update profile fields; returns None when the user has no profile."""
        profile = await self.get_by_user(user_id)
        if not profile:
            return None
        
        for field, value in fields.items():
            setattr(profile, field, value)
        
        profile.updated_at = utc_now()
        await self.db.flush()
        await self.db.refresh(profile)
        return profile
