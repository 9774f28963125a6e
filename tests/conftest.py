"""
Pytest configuration and shared fixtures.
"""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from taskboard.db.session import create_all_tables
from taskboard.repositories.task_record_store import (
    RecordNotFoundError,
    RecordStoreError,
    TaskRecordStore,
)
from taskboard.schemas.task import Task, TaskPriority, TaskStatus
from taskboard.services.notifications import Notifier
from taskboard.services.task_store import TaskStore


TEST_USER_ID = "user-1"
BASE_TIME = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: uses a temporary SQLite database")


# --- In-memory record store ------------------------------------------------

class FakeTaskRecordStore(TaskRecordStore):
    """
    In-memory record store for task store unit tests.

    Rows are kept in wire shape (ISO text, nulls). Any operation named in
    fail_next raises RecordStoreError once; failing_users makes select_all
    fail for those users. update_delays (per title) and select_delays (per
    user) hold latencies so tests can control response ordering.
    """

    def __init__(self) -> None:
        self.rows: Dict[str, Dict[str, Any]] = {}
        self.calls: List[tuple] = []
        self.fail_next: set = set()
        self.update_delays: Dict[str, float] = {}
        self.select_delays: Dict[str, float] = {}
        self.failing_users: set = set()
        self._tick = 0

    def seed(self, user_id: str, **fields: Any) -> Dict[str, Any]:
        """Insert a row directly, bypassing call tracking."""
        self._tick += 1
        stamp = (BASE_TIME + timedelta(minutes=self._tick)).isoformat()
        row = {
            "id": fields.pop("id", None) or str(uuid.uuid4()),
            "user_id": user_id,
            "title": "Untitled",
            "description": None,
            "status": "pending",
            "priority": "medium",
            "due_date": None,
            "created_at": stamp,
            "updated_at": stamp,
        }
        row.update(fields)
        self.rows[row["id"]] = row
        return dict(row)

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail_next:
            self.fail_next.discard(op)
            raise RecordStoreError(f"{op} failed")

    async def select_all(self, user_id: str) -> List[Dict[str, Any]]:
        self.calls.append(("select_all", user_id))
        self._maybe_fail("select_all")
        delay = self.select_delays.get(user_id, 0)
        if delay:
            await asyncio.sleep(delay)
        if user_id in self.failing_users:
            raise RecordStoreError(f"select_all failed for {user_id}")
        rows = [dict(r) for r in self.rows.values() if r["user_id"] == user_id]
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)

    async def insert(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        self.calls.append(("insert", dict(record)))
        self._maybe_fail("insert")
        now = datetime.now(timezone.utc).isoformat()
        row = dict(record)
        row.update(id=str(uuid.uuid4()), created_at=now, updated_at=now)
        self.rows[row["id"]] = row
        return dict(row)

    async def update(self, user_id: str, record_id: str, partial: Mapping[str, Any]) -> None:
        self.calls.append(("update", record_id, dict(partial)))
        delay = self.update_delays.get(partial.get("title", ""), 0)
        if delay:
            await asyncio.sleep(delay)
        self._maybe_fail("update")
        row = self.rows.get(record_id)
        if row is None or row["user_id"] != user_id:
            raise RecordNotFoundError(f"Task {record_id} not found")
        row.update(partial)
        row["updated_at"] = datetime.now(timezone.utc).isoformat()

    async def delete(self, user_id: str, record_id: str) -> None:
        self.calls.append(("delete", record_id))
        self._maybe_fail("delete")
        row = self.rows.get(record_id)
        if row is None or row["user_id"] != user_id:
            raise RecordNotFoundError(f"Task {record_id} not found")
        del self.rows[record_id]


@pytest.fixture()
def record_store() -> FakeTaskRecordStore:
    return FakeTaskRecordStore()


@pytest.fixture()
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture()
def store(record_store: FakeTaskRecordStore, notifier: Notifier) -> TaskStore:
    return TaskStore(record_store, notifier, user_id=TEST_USER_ID)


# --- Task builders ---------------------------------------------------------

def make_task(
    task_id: str,
    title: str = "Task",
    *,
    status: TaskStatus = TaskStatus.PENDING,
    priority: TaskPriority = TaskPriority.MEDIUM,
    description: Optional[str] = None,
    due_in_days: Optional[int] = None,
    created_minutes: int = 0,
) -> Task:
    created = BASE_TIME + timedelta(minutes=created_minutes)
    return Task(
        id=task_id,
        title=title,
        description=description,
        status=status,
        priority=priority,
        due_date=BASE_TIME + timedelta(days=due_in_days) if due_in_days is not None else None,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture()
def sample_tasks() -> List[Task]:
    """A mixed board, most-recent-first like the store cache."""
    return [
        make_task("6", "Performance optimization", status=TaskStatus.IN_PROGRESS,
                  description="Analyze and optimize bundle size and load times",
                  due_in_days=7, created_minutes=60),
        make_task("5", "Update dependencies", priority=TaskPriority.LOW,
                  description="Upgrade all packages to latest stable versions", created_minutes=50),
        make_task("4", "Set up CI/CD pipeline", status=TaskStatus.COMPLETED,
                  description="Configure automated testing and deployment", created_minutes=40),
        make_task("3", "Write API documentation",
                  description="Document all REST endpoints with examples", created_minutes=30),
        make_task("2", "implement authentication flow", status=TaskStatus.IN_PROGRESS,
                  priority=TaskPriority.HIGH, due_in_days=5, created_minutes=20),
        make_task("1", "Design review", priority=TaskPriority.HIGH, due_in_days=2, created_minutes=10),
    ]


# --- SQLite-backed fixtures ------------------------------------------------

@pytest.fixture()
def session_maker(tmp_path: Path):
    """Session factory over a fresh SQLite file with every table created."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )
    asyncio.run(create_all_tables(engine))
    try:
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    finally:
        asyncio.run(engine.dispose())
