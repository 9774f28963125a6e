"""
Profile model.

Display name and avatar for a user; at most one row per user.
"""

from typing import Optional

from sqlalchemy import String, Index
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.models.base_model import UserScopedModel


class Profile(UserScopedModel):
    """Profile table."""
    
    __tablename__ = "profile"
    
    display_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    
    avatar_url: Mapped[Optional[str]] = mapped_column(
        String(1024),
        nullable=True,
    )

    __table_args__ = (
        Index("uq_profile_user", "user_id", unique=True),
    )
