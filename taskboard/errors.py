"""Structured error helpers for API responses."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

from taskboard.services.task_store import TaskStoreError


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    def __init__(self, status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = build_error_payload(code, message, details)


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload)


def raise_app_error(status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None) -> None:
    """Raise an AppError with a standardized error shape."""
    raise AppError(status_code, code, message, details)


def raise_task_error(error: TaskStoreError) -> None:
    """Map a failed store command onto a 404 (unknown task) or 502 (record store)."""
    if error.not_found:
        raise_app_error(status.HTTP_404_NOT_FOUND, "task_not_found", error.message)
    if error.cause is None:
        raise_app_error(status.HTTP_401_UNAUTHORIZED, error.code, error.message)
    raise_app_error(status.HTTP_502_BAD_GATEWAY, error.code, error.message)
