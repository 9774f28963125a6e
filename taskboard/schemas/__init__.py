"""
Schemas package.

Import all schemas here for easy access.
"""

from taskboard.schemas.task import (
    Task,
    TaskBoard,
    TaskChanges,
    TaskCounts,
    TaskDraft,
    TaskFilter,
    TaskListResponse,
    TaskPriority,
    TaskSort,
    TaskStatus,
    TaskStatusChange,
)
from taskboard.schemas.task_record import TaskRecordCreate, TaskRecordUpdate, TaskRecordRead
from taskboard.schemas.profile import ProfileRead, DisplayNameUpdate
from taskboard.schemas.auth import SessionRequest, SessionResponse
