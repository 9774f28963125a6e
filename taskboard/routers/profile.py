"""
Profile router - display name and avatar for the current user.
"""

from fastapi import APIRouter, Depends, File, UploadFile, status

from taskboard.core.config import settings
from taskboard.core.dependencies import get_current_user_id, get_profile_service
from taskboard.errors import raise_app_error
from taskboard.schemas.profile import DisplayNameUpdate, ProfileRead
from taskboard.services.profile_service import (
    ALLOWED_AVATAR_EXTENSIONS,
    InvalidAvatarError,
    ProfileError,
    ProfileService,
)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileRead)
async def get_profile(
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    """Get the current user's profile."""
    return await service.get_profile(user_id)


@router.patch("", response_model=ProfileRead)
async def update_profile(
    data: DisplayNameUpdate,
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    """Change the display name."""
    try:
        return await service.update_display_name(user_id, data.display_name)
    except ProfileError as exc:
        raise_app_error(status.HTTP_502_BAD_GATEWAY, "profile_update_failed", str(exc))


@router.put("/avatar", response_model=ProfileRead)
async def upload_avatar(
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    """Upload a new avatar image (png, jpg, jpeg, gif or webp)."""
    content = await file.read()
    if len(content) > settings.AVATAR_MAX_BYTES:
        raise_app_error(
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            "avatar_too_large",
            "Avatar image is too large",
            {"max_bytes": settings.AVATAR_MAX_BYTES},
        )
    try:
        return await service.upload_avatar(user_id, file.filename or "", content)
    except InvalidAvatarError as exc:
        raise_app_error(
            status.HTTP_400_BAD_REQUEST,
            "avatar_invalid",
            str(exc),
            {"allowed_extensions": sorted(ALLOWED_AVATAR_EXTENSIONS)},
        )
    except ProfileError as exc:
        raise_app_error(status.HTTP_502_BAD_GATEWAY, "avatar_upload_failed", str(exc))


@router.delete("/avatar", response_model=ProfileRead)
async def remove_avatar(
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    """Remove the avatar image."""
    try:
        return await service.remove_avatar(user_id)
    except ProfileError as exc:
        raise_app_error(status.HTTP_502_BAD_GATEWAY, "avatar_remove_failed", str(exc))
