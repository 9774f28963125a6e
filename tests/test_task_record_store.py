"""Tests for the SQLAlchemy task record store (temporary SQLite database)."""

import asyncio
import uuid

import pytest

from taskboard.repositories.task_record_store import (
    RecordNotFoundError,
    RecordStoreError,
    SqlTaskRecordStore,
)
from taskboard.schemas.task import TaskChanges, TaskDraft, TaskStatus
from taskboard.services.notifications import Notifier
from taskboard.services.task_mapping import parse_timestamp
from taskboard.services.task_store import TaskStore

pytestmark = pytest.mark.db


def _record(user_id="user-1", **fields):
    record = {
        "user_id": user_id,
        "title": "Write report",
        "description": None,
        "status": "pending",
        "priority": "medium",
        "due_date": None,
    }
    record.update(fields)
    return record


def test_insert_assigns_id_and_timestamps(session_maker):
    records = SqlTaskRecordStore(session_maker)

    created = asyncio.run(records.insert(_record(due_date="2026-06-01T12:00:00+00:00")))

    uuid.UUID(created["id"])
    assert created["user_id"] == "user-1"
    assert created["description"] is None
    assert parse_timestamp(created["due_date"]).isoformat() == "2026-06-01T12:00:00+00:00"
    assert parse_timestamp(created["updated_at"]) >= parse_timestamp(created["created_at"])


def test_select_all_is_scoped_and_newest_first(session_maker):
    records = SqlTaskRecordStore(session_maker)

    async def scenario():
        await records.insert(_record(title="first"))
        await records.insert(_record(title="second"))
        await records.insert(_record(user_id="user-2", title="other"))
        return await records.select_all("user-1")

    rows = asyncio.run(scenario())
    assert [r["title"] for r in rows] == ["second", "first"]


def test_update_applies_partial_write(session_maker):
    records = SqlTaskRecordStore(session_maker)

    async def scenario():
        created = await records.insert(_record(description="keep"))
        await records.update("user-1", created["id"], {"status": "completed"})
        return created, (await records.select_all("user-1"))[0]

    created, row = asyncio.run(scenario())
    assert row["status"] == "completed"
    assert row["description"] == "keep"
    assert parse_timestamp(row["updated_at"]) >= parse_timestamp(created["updated_at"])


def test_update_and_delete_are_user_scoped(session_maker):
    records = SqlTaskRecordStore(session_maker)
    created = asyncio.run(records.insert(_record()))

    with pytest.raises(RecordNotFoundError):
        asyncio.run(records.update("user-2", created["id"], {"title": "stolen"}))
    with pytest.raises(RecordNotFoundError):
        asyncio.run(records.delete("user-2", created["id"]))


def test_missing_and_malformed_ids_are_not_found(session_maker):
    records = SqlTaskRecordStore(session_maker)

    with pytest.raises(RecordNotFoundError):
        asyncio.run(records.delete("user-1", str(uuid.uuid4())))
    with pytest.raises(RecordNotFoundError):
        asyncio.run(records.delete("user-1", "not-a-uuid"))


def test_invalid_records_are_rejected(session_maker):
    records = SqlTaskRecordStore(session_maker)

    with pytest.raises(RecordStoreError):
        asyncio.run(records.insert({"title": "no owner"}))
    with pytest.raises(RecordStoreError):
        asyncio.run(records.update("user-1", str(uuid.uuid4()), {"user_id": "user-2"}))


def test_task_store_against_sql_records(session_maker):
    notifier = Notifier()
    store = TaskStore(SqlTaskRecordStore(session_maker), notifier, user_id="user-1")

    async def scenario():
        await store.load()
        one = (await store.create(TaskDraft(title="one"))).task
        two = (await store.create(TaskDraft(title="two"))).task
        await store.set_status(two.id, TaskStatus.IN_PROGRESS)
        await store.update(one.id, TaskChanges(description="details"))

        assert (await store.delete(one.id)).ok
        again = await store.delete(one.id)
        assert not again.ok and again.error.not_found

        reloaded = TaskStore(SqlTaskRecordStore(session_maker), user_id="user-1")
        await reloaded.load()
        return reloaded

    reloaded = asyncio.run(scenario())

    assert [t.title for t in store.tasks] == ["two"]
    assert [(t.title, t.status) for t in reloaded.tasks] == [("two", TaskStatus.IN_PROGRESS)]
    assert [n.message for n in notifier.pending() if n.level == "error"] == ["Failed to delete task"]
