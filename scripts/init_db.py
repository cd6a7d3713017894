#!/usr/bin/env python
"""
Script untuk inisialisasi database SecureAuth API.
Membuat tabel accounts dan memverifikasi hasilnya.
Usage: python scripts/init_db.py
"""

import asyncio
import sys
from pathlib import Path
import logging

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine

from secureauth.core.config import settings
from secureauth.db.base import Base
from secureauth.db.session import create_engine, init_db, close_db

# Import all models to ensure they're registered
from secureauth.models import account  # noqa: F401

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

REQUIRED_TABLES = {"accounts"}


async def verify_tables(engine: AsyncEngine) -> bool:
    """Verify that all required tables exist."""
    async with engine.connect() as conn:
        existing_tables = set(
            await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        )

    missing_tables = REQUIRED_TABLES - existing_tables
    if missing_tables:
        logger.warning(f"Missing tables: {missing_tables}")
        return False

    logger.info("All required tables exist")
    return True


async def main():
    """Main initialization function."""
    logger.info("=== SecureAuth API Database Initialization ===")
    logger.info(f"Tables: {sorted(Base.metadata.tables)}")

    engine = create_engine(settings)

    try:
        logger.info("Step 1: Creating database tables...")
        await init_db(engine, create_tables=True)

        logger.info("Step 2: Verifying tables...")
        if not await verify_tables(engine):
            raise RuntimeError("Table verification failed")

        logger.info("Database initialization completed successfully")
        logger.info("Start the API with 'uvicorn --factory secureauth.main:create_application'")

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        sys.exit(1)
    finally:
        await close_db(engine)


if __name__ == "__main__":
    asyncio.run(main())
