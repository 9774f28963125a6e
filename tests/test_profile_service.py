"""Tests for the profile service (display name and avatar)."""

import asyncio

import pytest

from taskboard.services.avatar_storage import AvatarStorageError, LocalAvatarStorage
from taskboard.services.notifications import Notifier
from taskboard.services.profile_service import InvalidAvatarError, ProfileError, ProfileService

pytestmark = pytest.mark.db


@pytest.fixture()
def storage(tmp_path):
    return LocalAvatarStorage(tmp_path / "avatars", "/avatars")


def _run(session_maker, storage, notifier, action):
    async def scenario():
        async with session_maker() as db:
            service = ProfileService(db, storage, notifier)
            result = await action(service)
            await db.commit()
            return result

    return asyncio.run(scenario())


def test_profile_is_created_on_first_read(session_maker, storage, notifier):
    async def action(service):
        first = await service.get_profile("user-1")
        second = await service.get_profile("user-1")
        return first, second

    first, second = _run(session_maker, storage, notifier, action)

    assert first.id == second.id
    assert first.display_name is None
    assert first.avatar_url is None


def test_update_display_name(session_maker, storage, notifier):
    async def action(service):
        return await service.update_display_name("user-1", "Ada")

    profile = _run(session_maker, storage, notifier, action)

    assert profile.display_name == "Ada"
    assert [n.message for n in notifier.pending()] == ["Display name updated!"]


def test_upload_avatar_stores_file_and_sets_url(session_maker, storage, notifier, tmp_path):
    async def action(service):
        return await service.upload_avatar("user-1", "Me.PNG", b"\x89PNG")

    profile = _run(session_maker, storage, notifier, action)

    assert (tmp_path / "avatars" / "user-1" / "avatar.png").read_bytes() == b"\x89PNG"
    url, _, buster = profile.avatar_url.partition("?t=")
    assert url == "/avatars/user-1/avatar.png"
    assert buster.isdigit()
    assert [n.message for n in notifier.pending()] == ["Avatar updated!"]


def test_upload_rejects_unknown_extension(session_maker, storage, notifier, tmp_path):
    async def action(service):
        with pytest.raises(InvalidAvatarError) as excinfo:
            await service.upload_avatar("user-1", "notes.txt", b"hello")
        return str(excinfo.value)

    message = _run(session_maker, storage, notifier, action)

    assert message == "Failed to upload avatar"
    assert not (tmp_path / "avatars").exists()
    assert [(n.level, n.message) for n in notifier.pending()] == [("error", "Failed to upload avatar")]


def test_storage_failure_is_not_reported_as_a_bad_file(session_maker, notifier, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    broken = LocalAvatarStorage(blocker, "/avatars")

    async def action(service):
        with pytest.raises(ProfileError) as excinfo:
            await service.upload_avatar("user-1", "me.png", b"\x89PNG")
        return excinfo.value

    error = _run(session_maker, broken, notifier, action)

    assert not isinstance(error, InvalidAvatarError)
    assert str(error) == "Failed to upload avatar"
    assert [(n.level, n.message) for n in notifier.pending()] == [("error", "Failed to upload avatar")]


def test_remove_avatar(session_maker, storage, notifier):
    async def action(service):
        untouched = await service.remove_avatar("user-1")
        assert untouched.avatar_url is None
        await service.upload_avatar("user-1", "me.jpg", b"jpg")
        return await service.remove_avatar("user-1")

    profile = _run(session_maker, storage, notifier, action)

    assert profile.avatar_url is None
    assert [n.message for n in notifier.pending()] == ["Avatar updated!", "Avatar removed!"]


def test_storage_refuses_paths_outside_its_root(storage):
    with pytest.raises(AvatarStorageError):
        asyncio.run(storage.upload("../escape.png", b"x"))


def test_storage_without_upsert_keeps_existing_object(storage):
    asyncio.run(storage.upload("user-1/avatar.png", b"one"))
    with pytest.raises(AvatarStorageError):
        asyncio.run(storage.upload("user-1/avatar.png", b"two", upsert=False))
