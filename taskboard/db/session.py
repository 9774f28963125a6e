"""
Database session and engine configuration.

This file sets up the async database connection using SQLAlchemy
(aiosqlite for local development, asyncpg for PostgreSQL).
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from typing import AsyncGenerator

from taskboard.core.config import settings


# Create the async database engine
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # When DEBUG=True, prints SQL queries to console
    future=True,
)

# Create a session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,  # Keeps data accessible after commit
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session.
    
    This is used by FastAPI to provide a database connection to your API endpoints.
    The session is committed when the request succeeds and rolled back otherwise.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_all_tables(bind: AsyncEngine = engine) -> None:
    """Create every table registered on Base.metadata (dev/test databases)."""
    from taskboard.db.base import Base
    import taskboard.models  # noqa: F401  (registers the tables)

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
