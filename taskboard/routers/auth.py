"""
Session router - issue and revoke session tokens.

Credential checks belong to the external identity provider. Issuing a token
for an arbitrary user id is a local-development aid and only answers when
ALLOW_DEV_SESSIONS is enabled.
"""

import logging

from fastapi import APIRouter, Depends, status

from taskboard.core.config import settings
from taskboard.core.dependencies import get_current_user_id, get_store_registry
from taskboard.core.session import session_manager
from taskboard.errors import raise_app_error
from taskboard.schemas.auth import SessionRequest, SessionResponse
from taskboard.services.store_registry import TaskStoreRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/session", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def open_session(data: SessionRequest):
    """Issue a signed session token for a user id (development only)."""
    if not settings.ALLOW_DEV_SESSIONS:
        raise_app_error(status.HTTP_404_NOT_FOUND, "not_found", "Not Found")

    logger.warning("Issuing development session token for user %s", data.user_id)
    token = session_manager.create_session_token(data.user_id)
    return SessionResponse(access_token=token, user_id=data.user_id)


@router.delete("/session", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(
    user_id: str = Depends(get_current_user_id),
    registry: TaskStoreRegistry = Depends(get_store_registry),
):
    """
    Sign out: drop the user's task store and its cached tasks.
    
    The token itself stays valid until it expires.
    """
    await registry.close(user_id)
