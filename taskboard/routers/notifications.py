"""Notifications router - drain pending toasts for the current user."""

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from taskboard.core.dependencies import get_current_user_id, get_store_registry
from taskboard.services.store_registry import TaskStoreRegistry

router = APIRouter(prefix="/notifications", tags=["notifications"])


class NotificationRead(BaseModel):
    level: str
    message: str
    created_at: datetime


@router.get("", response_model=List[NotificationRead])
async def drain_notifications(
    user_id: str = Depends(get_current_user_id),
    registry: TaskStoreRegistry = Depends(get_store_registry),
):
    """Return and clear every pending notification, oldest first."""
    notifier = await registry.get_notifier(user_id)
    return [
        NotificationRead(level=n.level, message=n.message, created_at=n.created_at)
        for n in notifier.drain()
    ]
