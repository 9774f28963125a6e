"""
Task model.

One row per task, owned by exactly one user.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, String, Text, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.models.base_model import UserScopedModel


class TaskRow(UserScopedModel):
    """
    Task table - the remote record collection behind the task store.
    """
    
    __tablename__ = "task"
    
    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
    )
    
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
    )
    
    priority: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default="medium",
    )
    
    due_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_task_user_created", "user_id", "created_at"),
        CheckConstraint("status IN ('pending', 'in-progress', 'completed')", name="ck_task_status"),
        CheckConstraint("priority IN ('high', 'medium', 'low')", name="ck_task_priority"),
    )
