"""
Task store - the per-session owner of a user's tasks.

Holds the local cache, the list-view filter and sort, and applies commands
against the task record store. The cache is only touched after the record
store confirms a write, so a failed command never leaves partial state.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError

from taskboard.repositories.task_record_store import (
    RecordNotFoundError,
    RecordStoreError,
    TaskRecordStore,
)
from taskboard.schemas.task import (
    Task,
    TaskChanges,
    TaskCounts,
    TaskDraft,
    TaskFilter,
    TaskSort,
    TaskStatus,
)
from taskboard.services import task_views
from taskboard.services.identity import IdentityProvider
from taskboard.services.notifications import Notifier
from taskboard.services.task_mapping import (
    apply_changes,
    record_from_changes,
    record_from_draft,
    task_from_record,
)
from taskboard.utils.time import utc_now

logger = logging.getLogger(__name__)


class TaskStoreError(Exception):
    """A task command failed; message is the fixed user-facing text."""

    message = "Task operation failed"
    code = "task_error"

    def __init__(self, cause: Optional[BaseException] = None, detail: Optional[str] = None):
        super().__init__(detail or self.message)
        self.cause = cause
        self.detail = detail

    @property
    def not_found(self) -> bool:
        return isinstance(self.cause, RecordNotFoundError)


class LoadFailure(TaskStoreError):
    message = "Failed to load tasks"
    code = "task_load_failed"


class CreateFailure(TaskStoreError):
    message = "Failed to create task"
    code = "task_create_failed"


class UpdateFailure(TaskStoreError):
    message = "Failed to update task"
    code = "task_update_failed"


class DeleteFailure(TaskStoreError):
    message = "Failed to delete task"
    code = "task_delete_failed"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a store command."""

    ok: bool
    task: Optional[Task] = None
    error: Optional[TaskStoreError] = None

    @classmethod
    def success(cls, task: Optional[Task] = None) -> "CommandResult":
        return cls(ok=True, task=task)

    @classmethod
    def failure(cls, error: TaskStoreError) -> "CommandResult":
        return cls(ok=False, error=error)


class TaskStore:
    """
    Owned state for one authenticated session.

    Commands are coroutines; each awaits the record store and then applies
    its local effect. Concurrent commands are not serialized, so the last
    response to arrive wins at the cache.
    """

    def __init__(
        self,
        records: TaskRecordStore,
        notifier: Optional[Notifier] = None,
        user_id: Optional[str] = None,
    ):
        self._records = records
        self._notifier = notifier or Notifier()
        self._user_id = user_id
        self._tasks: List[Task] = []
        self._filter = TaskFilter()
        self._sort = TaskSort()
        self._loading = False
        self._unsubscribe: Optional[Callable[[], None]] = None

    # ---- state ----

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def tasks(self) -> Tuple[Task, ...]:
        """The full, unfiltered cache in most-recent-first order."""
        return tuple(self._tasks)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    @property
    def filter(self) -> TaskFilter:
        return self._filter

    @property
    def sort(self) -> TaskSort:
        return self._sort

    def set_filter(self, task_filter: TaskFilter) -> None:
        self._filter = task_filter

    def set_sort(self, task_sort: TaskSort) -> None:
        self._sort = task_sort

    def get(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    # ---- identity ----

    async def bind(self, identity: IdentityProvider) -> None:
        """Follow identity changes: reload on a new user, clear on sign-out."""
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._unsubscribe = identity.subscribe(self.set_user)
        if identity.user_id is not None and identity.user_id != self._user_id:
            await self.set_user(identity.user_id)

    def unbind(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def set_user(self, user_id: Optional[str]) -> None:
        self._user_id = user_id
        self._tasks = []
        if user_id is not None:
            await self.load()

    # ---- commands ----

    async def load(self) -> CommandResult:
        """Replace the cache with every record owned by the current user."""
        if self._user_id is None:
            logger.debug("Task load skipped: no authenticated user")
            return CommandResult.success()

        user_id = self._user_id
        self._loading = True
        try:
            records = await self._records.select_all(user_id)
            tasks = [task_from_record(record) for record in records]
        except (RecordStoreError, ValidationError, KeyError, ValueError) as exc:
            if user_id != self._user_id:
                logger.debug("Dropping load failure for previous user %s: %r", user_id, exc)
                return CommandResult.success()
            self._tasks = []
            return self._fail(LoadFailure(exc))
        finally:
            self._loading = False

        # Identity may have changed while the request was in flight.
        if user_id != self._user_id:
            return CommandResult.success()

        self._tasks = tasks
        logger.info("Loaded %s tasks for user %s", len(tasks), user_id)
        return CommandResult.success()

    async def create(self, draft: TaskDraft) -> CommandResult:
        """Insert a new task and prepend the stored row to the cache."""
        if self._user_id is None:
            return CommandResult.failure(CreateFailure(detail="No authenticated user"))

        try:
            created = await self._records.insert(record_from_draft(self._user_id, draft))
            task = task_from_record(created)
        except (RecordStoreError, ValidationError, KeyError, ValueError) as exc:
            return self._fail(CreateFailure(exc))

        self._tasks = [task] + self._tasks
        logger.info("Created task %s", task.id)
        self._notifier.success("Task created successfully")
        return CommandResult.success(task)

    async def update(self, task_id: str, changes: TaskChanges) -> CommandResult:
        """Write the fields present in changes, then merge them locally."""
        return await self._update(task_id, changes, "Task updated successfully")

    async def set_status(self, task_id: str, status: TaskStatus) -> CommandResult:
        """Move a task to another stage; any status may be written."""
        return await self._update(
            task_id,
            TaskChanges(status=status),
            f"Task moved to {TaskStatus(status).label}",
        )

    async def delete(self, task_id: str) -> CommandResult:
        """Delete a task and drop it from the cache."""
        if self._user_id is None:
            return CommandResult.failure(DeleteFailure(detail="No authenticated user"))

        try:
            await self._records.delete(self._user_id, task_id)
        except RecordStoreError as exc:
            return self._fail(DeleteFailure(exc))

        removed = self.get(task_id)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        logger.info("Deleted task %s", task_id)
        self._notifier.success("Task deleted")
        return CommandResult.success(removed)

    async def _update(self, task_id: str, changes: TaskChanges, success_message: str) -> CommandResult:
        if self._user_id is None:
            return CommandResult.failure(UpdateFailure(detail="No authenticated user"))

        # Unknown ids are rejected before any remote write.
        if self.get(task_id) is None:
            return self._fail(UpdateFailure(RecordNotFoundError(f"Task {task_id} not found")))

        partial = record_from_changes(changes)
        if partial:
            try:
                await self._records.update(self._user_id, task_id, partial)
            except RecordStoreError as exc:
                return self._fail(UpdateFailure(exc))

        merged: Optional[Task] = None
        now = utc_now()
        tasks: List[Task] = []
        for task in self._tasks:
            if task.id == task_id:
                task = apply_changes(task, changes, now)
                merged = task
            tasks.append(task)
        self._tasks = tasks

        logger.info("Updated task %s fields=%s", task_id, sorted(partial))
        self._notifier.success(success_message)
        return CommandResult.success(merged)

    def _fail(self, error: TaskStoreError) -> CommandResult:
        if error.not_found:
            logger.warning("%s: %s", error.message, error.cause)
        else:
            logger.error("%s: %r", error.message, error.cause)
        self._notifier.error(error.message)
        return CommandResult.failure(error)

    # ---- derived views ----

    def view(self) -> List[Task]:
        """Filtered and sorted list view."""
        return task_views.filter_and_sort(self._tasks, self._filter, self._sort)

    def board(self) -> Dict[TaskStatus, List[Task]]:
        """Every task grouped by status, ignoring filter and sort."""
        return task_views.group_by_status(self._tasks)

    def counts(self) -> TaskCounts:
        return task_views.count_by_status(self._tasks)
