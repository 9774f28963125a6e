"""
Task router - API endpoints for the current user's tasks.
"""

from typing import Literal, Optional, Union

from fastapi import APIRouter, Depends, Query, Response, status

from taskboard.core.dependencies import get_task_store
from taskboard.errors import raise_app_error, raise_task_error
from taskboard.schemas.task import (
    SortDirection,
    Task,
    TaskBoard,
    TaskChanges,
    TaskCounts,
    TaskDraft,
    TaskFilter,
    TaskListResponse,
    TaskPriority,
    TaskSort,
    TaskSortField,
    TaskStatus,
    TaskStatusChange,
)
from taskboard.services.task_store import TaskStore

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    store: TaskStore = Depends(get_task_store),
    status_filter: Union[TaskStatus, Literal["all"]] = Query("all", alias="status"),
    priority: Union[TaskPriority, Literal["all"]] = Query("all"),
    search: str = "",
    sort_field: Optional[TaskSortField] = None,
    sort_direction: Optional[SortDirection] = None,
):
    """
    List tasks with filters and sorting.
    
    The filter and sort become the store's current list-view settings;
    omitted sort parameters keep the previous values.
    """
    store.set_filter(TaskFilter(status=status_filter, priority=priority, search=search))
    store.set_sort(TaskSort(
        field=sort_field or store.sort.field,
        direction=sort_direction or store.sort.direction,
    ))
    return TaskListResponse(
        tasks=store.view(),
        filter=store.filter,
        sort=store.sort,
        counts=store.counts(),
    )


@router.get("/board", response_model=TaskBoard)
async def get_board(store: TaskStore = Depends(get_task_store)):
    """Every task grouped by status (filters do not apply)."""
    buckets = store.board()
    return TaskBoard(
        pending=buckets[TaskStatus.PENDING],
        in_progress=buckets[TaskStatus.IN_PROGRESS],
        completed=buckets[TaskStatus.COMPLETED],
    )


@router.get("/counts", response_model=TaskCounts)
async def get_counts(store: TaskStore = Depends(get_task_store)):
    """Total and per-status counts."""
    return store.counts()


@router.post("/reload", response_model=TaskCounts)
async def reload_tasks(store: TaskStore = Depends(get_task_store)):
    """Reload the cache from the record store."""
    result = await store.load()
    if not result.ok:
        raise_task_error(result.error)
    return store.counts()


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: str, store: TaskStore = Depends(get_task_store)):
    """Get a cached task by ID."""
    task = store.get(task_id)
    if not task:
        raise_app_error(status.HTTP_404_NOT_FOUND, "task_not_found", f"Task {task_id} not found")
    return task


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(data: TaskDraft, store: TaskStore = Depends(get_task_store)):
    """Create a new task."""
    result = await store.create(data)
    if not result.ok:
        raise_task_error(result.error)
    return result.task


@router.patch("/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    data: TaskChanges,
    store: TaskStore = Depends(get_task_store),
):
    """Update the fields present in the body."""
    result = await store.update(task_id, data)
    if not result.ok:
        raise_task_error(result.error)
    return result.task


@router.post("/{task_id}/status", response_model=Task)
async def change_task_status(
    task_id: str,
    data: TaskStatusChange,
    store: TaskStore = Depends(get_task_store),
):
    """Move a task to another workflow stage."""
    result = await store.set_status(task_id, data.status)
    if not result.ok:
        raise_task_error(result.error)
    return result.task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: str, store: TaskStore = Depends(get_task_store)):
    """Delete a task."""
    result = await store.delete(task_id)
    if not result.ok:
        raise_task_error(result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
