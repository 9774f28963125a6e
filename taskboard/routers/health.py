"""Health check router."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.dependencies import get_store_registry
from taskboard.db.session import get_db
from taskboard.repositories.task_record_store import RecordStoreError
from taskboard.services.store_registry import TaskStoreRegistry

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(
    db: AsyncSession = Depends(get_db),
    registry: TaskStoreRegistry = Depends(get_store_registry),
):
    """
    Liveness of the database connection and the task record store.

    Answers 503 with the same body when either check fails.
    """
    db_ok = True
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Health check: database unreachable: %s", exc)
        db_ok = False

    record_store_ok = True
    try:
        await registry.records.ping()
    except RecordStoreError as exc:
        logger.warning("Health check: task record store unavailable: %s", exc)
        record_store_ok = False

    healthy = db_ok and record_store_ok
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ok" if healthy else "degraded",
            "active_sessions": len(registry),
            "db_ok": db_ok,
            "record_store_ok": record_store_ok,
        },
    )
