"""
Derived views over the task cache.

Pure functions of (tasks, filter, sort). They never mutate their input and
are cheap enough to recompute on every read.
"""

import locale
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Sequence

from taskboard.schemas.task import (
    Task,
    TaskCounts,
    TaskFilter,
    TaskPriority,
    TaskSort,
    TaskStatus,
)

PRIORITY_ORDER: Dict[TaskPriority, int] = {
    TaskPriority.HIGH: 0,
    TaskPriority.MEDIUM: 1,
    TaskPriority.LOW: 2,
}

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _title_key(task: Task):
    # Primary: case-insensitive collation; secondary: exact collation.
    return (locale.strxfrm(task.title.casefold()), locale.strxfrm(task.title))


def _priority_key(task: Task) -> int:
    return PRIORITY_ORDER[task.priority]


def _due_date_key(task: Task):
    # Missing due dates behave as +infinity.
    return (task.due_date is None, task.due_date or _EPOCH)


def _created_at_key(task: Task) -> datetime:
    return task.created_at


_SORT_KEYS: Dict[str, Callable[[Task], object]] = {
    "title": _title_key,
    "priority": _priority_key,
    "due_date": _due_date_key,
    "created_at": _created_at_key,
}


def matches_search(task: Task, search: str) -> bool:
    """Case-insensitive substring match on title or description."""
    needle = search.casefold()
    if needle in task.title.casefold():
        return True
    return bool(task.description) and needle in task.description.casefold()


def filter_tasks(tasks: Iterable[Task], task_filter: TaskFilter) -> List[Task]:
    result = list(tasks)

    if task_filter.status != "all":
        result = [t for t in result if t.status == task_filter.status]

    if task_filter.priority != "all":
        result = [t for t in result if t.priority == task_filter.priority]

    if task_filter.search:
        result = [t for t in result if matches_search(t, task_filter.search)]

    return result


def sort_tasks(tasks: Iterable[Task], task_sort: TaskSort) -> List[Task]:
    """
    Stable sort by the chosen field.
    
    "desc" inverts the ordering, ties keep their original relative order in
    both directions.
    """
    key = _SORT_KEYS.get(task_sort.field, _created_at_key)
    return sorted(tasks, key=key, reverse=task_sort.direction == "desc")


def filter_and_sort(tasks: Sequence[Task], task_filter: TaskFilter, task_sort: TaskSort) -> List[Task]:
    """The list view: filter, then sort, always on a copy."""
    return sort_tasks(filter_tasks(tasks, task_filter), task_sort)


def group_by_status(tasks: Iterable[Task]) -> Dict[TaskStatus, List[Task]]:
    """Board buckets over every task; filter and sort do not apply."""
    buckets: Dict[TaskStatus, List[Task]] = {status: [] for status in TaskStatus}
    for task in tasks:
        buckets[task.status].append(task)
    return buckets


def count_by_status(tasks: Iterable[Task]) -> TaskCounts:
    buckets = group_by_status(tasks)
    return TaskCounts(
        total=sum(len(bucket) for bucket in buckets.values()),
        pending=len(buckets[TaskStatus.PENDING]),
        in_progress=len(buckets[TaskStatus.IN_PROGRESS]),
        completed=len(buckets[TaskStatus.COMPLETED]),
    )
