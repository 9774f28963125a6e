"""
Task Pydantic schemas.

These are the in-memory shapes the task store works with. Wire records
(nullable columns, ISO-8601 text) live in task_record.py.
"""

from enum import Enum
from typing import List, Literal, Optional, Union
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskStatus(str, Enum):
    """Workflow stages, in the order the board shows them."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        return self.value.replace("-", " ")


class TaskPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


TaskSortField = Literal["created_at", "due_date", "priority", "title"]
SortDirection = Literal["asc", "desc"]


def _require_title(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("title must not be empty")
    return value.strip()


class Task(BaseModel):
    """A task as held in the store's local cache."""
    
    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(frozen=True)


class TaskDraft(BaseModel):
    """Schema for creating a new task. id and timestamps come from the record store."""
    
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        return _require_title(value)


class TaskChanges(BaseModel):
    """
    Schema for updating a task. All fields optional.
    
    Only fields that were explicitly set are written; setting description or
    due_date to null clears them.
    """
    
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            raise ValueError("title cannot be cleared")
        return _require_title(value)

    @field_validator("status", "priority")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be cleared")
        return value


class TaskStatusChange(BaseModel):
    """Body for moving a task to another workflow stage."""

    status: TaskStatus


class TaskFilter(BaseModel):
    """List-view filter. "all" disables the status/priority criteria."""

    status: Union[TaskStatus, Literal["all"]] = "all"
    priority: Union[TaskPriority, Literal["all"]] = "all"
    search: str = ""


class TaskSort(BaseModel):
    """List-view ordering."""

    field: TaskSortField = "created_at"
    direction: SortDirection = "desc"


class TaskCounts(BaseModel):
    """Total and per-status counts over the whole (unfiltered) collection."""

    total: int = 0
    pending: int = 0
    in_progress: int = Field(0, serialization_alias="in-progress")
    completed: int = 0


class TaskBoard(BaseModel):
    """Board columns; each holds every task with that status."""

    pending: List[Task] = Field(default_factory=list)
    in_progress: List[Task] = Field(default_factory=list, serialization_alias="in-progress")
    completed: List[Task] = Field(default_factory=list)


class TaskListResponse(BaseModel):
    """List view with the filter and sort that produced it."""

    tasks: List[Task]
    filter: TaskFilter
    sort: TaskSort
    counts: TaskCounts
