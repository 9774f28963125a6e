"""
Translation between wire records and in-memory tasks.

Wire records use null for missing values and ISO-8601 text for timestamps;
the in-memory Task uses optional fields and aware datetimes. This module is
the only place that converts between the two.
"""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union

from taskboard.schemas.task import Task, TaskChanges, TaskDraft, TaskPriority, TaskStatus
from taskboard.utils.time import ensure_utc


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return ensure_utc(value).isoformat()


def task_from_record(record: Mapping[str, Any]) -> Task:
    """Build a cached Task from a record store row."""
    created_at = parse_timestamp(record["created_at"])
    updated_at = parse_timestamp(record.get("updated_at")) or created_at
    return Task(
        id=str(record["id"]),
        title=record["title"],
        description=record.get("description") or None,
        status=TaskStatus(record["status"]),
        priority=TaskPriority(record["priority"]),
        due_date=parse_timestamp(record.get("due_date")),
        created_at=created_at,
        updated_at=max(updated_at, created_at),
    )


def record_from_draft(user_id: str, draft: TaskDraft) -> Dict[str, Any]:
    """Insert payload for a new task owned by user_id."""
    return {
        "user_id": user_id,
        "title": draft.title,
        "description": draft.description,
        "status": draft.status.value,
        "priority": draft.priority.value,
        "due_date": format_timestamp(draft.due_date),
    }


def record_from_changes(changes: TaskChanges) -> Dict[str, Any]:
    """Partial write holding only the fields present in changes."""
    present = changes.model_dump(exclude_unset=True)
    record: Dict[str, Any] = {}
    for field, value in present.items():
        if field == "due_date":
            record[field] = format_timestamp(value)
        elif field in ("status", "priority"):
            record[field] = value.value
        else:
            record[field] = value
    return record


def apply_changes(task: Task, changes: TaskChanges, updated_at: datetime) -> Task:
    """Merge changes into a cached task and stamp it with updated_at."""
    present = changes.model_dump(exclude_unset=True)
    if "due_date" in present and present["due_date"] is not None:
        present["due_date"] = ensure_utc(present["due_date"])
    present["updated_at"] = max(ensure_utc(updated_at), task.created_at)
    return task.model_copy(update=present)
