"""
Database session management and connection handling.

Builds the async engine and session factory for the draft record store
from explicit settings, and creates the schema at startup.
"""

from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from docpush.core.config import Settings
from docpush.core.logging import get_logger
from docpush.db.base import Base

logger = get_logger(__name__)


def create_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the record store.

    For file-backed SQLite URLs the parent directory is created first.

    Args:
        settings: Application settings

    Returns:
        Configured async engine
    """
    url = make_url(settings.DATABASE_URL)

    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory used by the record store."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """
    Verify connectivity and create tables if they don't exist.

    Called during application startup.
    """
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Record store initialized")
    except Exception as e:
        logger.error(f"Failed to initialize record store: {e}")
        raise


async def close_db(engine: AsyncEngine) -> None:
    """
    Close database connections gracefully.

    Called during application shutdown to clean up resources.
    """
    try:
        await engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database connections: {e}")
        raise
