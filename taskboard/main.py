"""
Main FastAPI application.

This is the entry point for the API server:
    uvicorn taskboard.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from taskboard.core.config import settings
from taskboard.core.logging_setup import setup_logging
from taskboard.db.session import create_all_tables, engine
from taskboard.errors import AppError, app_error_handler
from taskboard.routers import (
    health,
    auth,
    task,
    profile,
    notifications,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for the FastAPI app.
    
    - On startup: configure logging, optionally create tables
    - On shutdown: dispose of the database engine
    """
    setup_logging()
    logger.info("Starting %s...", settings.APP_NAME)
    if settings.CREATE_TABLES_ON_STARTUP:
        await create_all_tables()
    
    yield
    
    logger.info("Shutting down %s...", settings.APP_NAME)
    await engine.dispose()


# Create the FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Personal task board API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(AppError, app_error_handler)

# Include routers (API endpoints)
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router)
app.include_router(task.router)
app.include_router(profile.router)
app.include_router(notifications.router)

# Avatar images (local blob storage)
app.mount(
    settings.AVATAR_PUBLIC_BASE_URL,
    StaticFiles(directory=str(Path(settings.AVATAR_STORAGE_ROOT)), check_dir=False),
    name="avatars",
)


# Root endpoint
@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint - redirects to the API docs."""
    return RedirectResponse(url="/docs", status_code=303)
