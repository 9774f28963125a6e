"""
FastAPI dependencies for the application.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.config import settings
from taskboard.core.session import session_manager
from taskboard.db.session import async_session_maker, get_db
from taskboard.repositories.task_record_store import SqlTaskRecordStore
from taskboard.services.avatar_storage import LocalAvatarStorage
from taskboard.services.profile_service import ProfileService
from taskboard.services.store_registry import TaskStoreRegistry
from taskboard.services.task_store import TaskStore

# Security scheme for bearer session tokens
security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    Resolve the authenticated user id from the bearer session token.
    
    Raises:
        401: If the token is missing, invalid or expired
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    user_id = session_manager.verify_session_token(credentials.credentials)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    return user_id


def get_store_registry(request: Request) -> TaskStoreRegistry:
    """Process-wide registry of per-user task stores."""
    registry = getattr(request.app.state, "store_registry", None)
    if registry is None:
        registry = TaskStoreRegistry(
            SqlTaskRecordStore(async_session_maker),
            notification_backlog=settings.NOTIFICATION_BACKLOG,
            idle_ttl=settings.STORE_IDLE_TTL_SECONDS,
            max_sessions=settings.MAX_ACTIVE_STORES,
        )
        request.app.state.store_registry = registry
    return registry


def get_avatar_storage(request: Request) -> LocalAvatarStorage:
    storage = getattr(request.app.state, "avatar_storage", None)
    if storage is None:
        storage = LocalAvatarStorage(settings.AVATAR_STORAGE_ROOT, settings.AVATAR_PUBLIC_BASE_URL)
        request.app.state.avatar_storage = storage
    return storage


async def get_task_store(
    user_id: str = Depends(get_current_user_id),
    registry: TaskStoreRegistry = Depends(get_store_registry),
) -> TaskStore:
    """The current user's task store (loaded on first access)."""
    return await registry.get_store(user_id)


async def get_profile_service(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    registry: TaskStoreRegistry = Depends(get_store_registry),
    storage: LocalAvatarStorage = Depends(get_avatar_storage),
) -> ProfileService:
    notifier = await registry.get_notifier(user_id)
    return ProfileService(db, storage, notifier)
