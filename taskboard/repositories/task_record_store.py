"""
Task record store - the remote collection of task rows.

The task store only talks to the abstract TaskRecordStore. Records cross
this boundary as plain dicts in wire shape (see schemas.task_record).
"""

import abc
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskboard.models.task import TaskRow
from taskboard.schemas.task_record import TaskRecordCreate, TaskRecordRead, TaskRecordUpdate
from taskboard.utils.time import utc_now

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class RecordStoreError(Exception):
    """A record store call failed."""


class RecordNotFoundError(RecordStoreError):
    """No record with the given id exists in the user's scope."""


class TaskRecordStore(abc.ABC):
    """User-scoped CRUD over task records."""

    @abc.abstractmethod
    async def select_all(self, user_id: str) -> List[Record]:
        """Every record owned by user_id, newest first."""

    @abc.abstractmethod
    async def insert(self, record: Mapping[str, Any]) -> Record:
        """Insert a record (must carry user_id) and return the stored row."""

    @abc.abstractmethod
    async def update(self, user_id: str, record_id: str, partial: Mapping[str, Any]) -> None:
        """Apply a partial write to one record."""

    @abc.abstractmethod
    async def delete(self, user_id: str, record_id: str) -> None:
        """Delete one record."""

    async def ping(self) -> None:
        """Raise RecordStoreError when the store cannot be reached."""


def _parse_id(record_id: str) -> UUID:
    try:
        return UUID(str(record_id))
    except ValueError as exc:
        raise RecordNotFoundError(f"Task {record_id} not found") from exc


def _to_wire(row: TaskRow) -> Record:
    return TaskRecordRead.model_validate(row).model_dump(mode="json")


class SqlTaskRecordStore(TaskRecordStore):
    """
    SQLAlchemy implementation of the task record store.
    
    Each call opens its own session and commits before returning, so the
    caller only ever sees confirmed writes.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    @asynccontextmanager
    async def _session(self, action: str) -> AsyncIterator[AsyncSession]:
        async with self._session_maker() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error("Task record %s failed: %s", action, exc)
                raise RecordStoreError(f"Task record {action} failed") from exc
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> None:
        async with self._session("ping") as session:
            await session.execute(select(TaskRow.id).limit(1))

    async def select_all(self, user_id: str) -> List[Record]:
        """List a user's task records, newest first."""
        async with self._session("select") as session:
            result = await session.execute(
                select(TaskRow)
                .where(TaskRow.user_id == user_id)
                .order_by(TaskRow.created_at.desc())
            )
            return [_to_wire(row) for row in result.scalars().all()]

    async def insert(self, record: Mapping[str, Any]) -> Record:
        """Create a new task record."""
        try:
            data = TaskRecordCreate.model_validate(dict(record))
        except ValidationError as exc:
            raise RecordStoreError("Invalid task record") from exc

        async with self._session("insert") as session:
            row = TaskRow(**data.model_dump())
            session.add(row)
            await session.flush()
            await session.refresh(row)
            created = _to_wire(row)

        logger.debug("Task record inserted id=%s user=%s", created["id"], data.user_id)
        return created

    async def update(self, user_id: str, record_id: str, partial: Mapping[str, Any]) -> None:
        """Update the given fields of a task record."""
        task_id = _parse_id(record_id)
        try:
            data = TaskRecordUpdate.model_validate(dict(partial))
        except ValidationError as exc:
            raise RecordStoreError("Invalid task update") from exc

        values = data.model_dump(exclude_unset=True)
        values["updated_at"] = utc_now()

        async with self._session("update") as session:
            result = await session.execute(
                update(TaskRow)
                .where(TaskRow.id == task_id, TaskRow.user_id == user_id)
                .values(**values)
            )
            if result.rowcount == 0:
                raise RecordNotFoundError(f"Task {record_id} not found")

    async def delete(self, user_id: str, record_id: str) -> None:
        """Delete a task record."""
        task_id = _parse_id(record_id)
        async with self._session("delete") as session:
            result = await session.execute(
                delete(TaskRow).where(TaskRow.id == task_id, TaskRow.user_id == user_id)
            )
            if result.rowcount == 0:
                raise RecordNotFoundError(f"Task {record_id} not found")
