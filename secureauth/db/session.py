"""
Database session management untuk SecureAuth API.
Menggunakan SQLAlchemy dengan async support.
"""

import logging

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    create_async_engine,
    async_sessionmaker
)
from sqlalchemy.pool import NullPool
from sqlalchemy import text

from secureauth.core.config import Settings
from secureauth.db.base import Base

logger = logging.getLogger(__name__)


def create_engine(settings: Settings) -> AsyncEngine:
    """
    Create async SQLAlchemy engine dari settings.

    Args:
        settings: Application settings

    Returns:
        Configured AsyncEngine
    """
    engine_args = {
        "echo": settings.DEBUG,
        "pool_pre_ping": settings.DB_POOL_PRE_PING,
    }

    if settings.ENVIRONMENT == "test" or settings.DATABASE_URL.startswith("sqlite"):
        # SQLite dan test environment: satu koneksi per session
        engine_args["poolclass"] = NullPool
    else:
        engine_args["pool_size"] = settings.DB_POOL_SIZE
        engine_args["max_overflow"] = settings.DB_MAX_OVERFLOW
        engine_args["pool_timeout"] = 30
        engine_args["pool_recycle"] = 3600

    return create_async_engine(settings.DATABASE_URL, **engine_args)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create session factory untuk engine.

    Args:
        engine: Async engine

    Returns:
        async_sessionmaker
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Objects tetap bisa dibaca setelah commit
        autoflush=False,
    )


async def init_db(engine: AsyncEngine, create_tables: bool = False) -> None:
    """
    Initialize database.
    - Test connection
    - Create tables jika diminta (biasanya pakai scripts/init_db.py)
    """
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            logger.info("Database connection successful")

            if create_tables:
                # Import models supaya ter-register di metadata
                from secureauth.models import account  # noqa: F401
                await conn.run_sync(Base.metadata.create_all)
                logger.info("Database tables created")

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


async def close_db(engine: AsyncEngine) -> None:
    """
    Close database connections.
    Should be called on application shutdown.
    """
    await engine.dispose()
    logger.info("Database connections closed")
