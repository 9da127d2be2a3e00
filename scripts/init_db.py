#!/usr/bin/env python3
"""
Database initialization script.

Creates the draft record store tables. Run this after setting up your
environment variables; the application also does this at startup.
"""

import asyncio

from docpush.core.config import Settings
from docpush.core.logging import get_logger, setup_logging
from docpush.db.session import close_db, create_engine, init_db

logger = get_logger(__name__)


async def init_database() -> None:
    """Initialize database schema."""
    settings = Settings()
    setup_logging(settings)
    engine = create_engine(settings)

    try:
        logger.info(f"Initializing record store at {settings.DATABASE_URL}")
        await init_db(engine)
        logger.info("Database initialization completed successfully")
    finally:
        await close_db(engine)


if __name__ == "__main__":
    asyncio.run(init_database())
