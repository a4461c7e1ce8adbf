"""
backend/shoreline/database/session.py

Async engine, session factory and the per-request `get_db` dependency.
"""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from shoreline.core.config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(settings.db_url, echo=False, pool_pre_ping=True)

# Loaded projects are serialized after commit, so attributes must stay populated.
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request; rolled back if the handler raises."""
    async with AsyncSessionLocal() as db:
        try:
            yield db
        except Exception:
            logger.debug("[DB] Rolling back session after request error")
            await db.rollback()
            raise
