"""
Database configuration and session management.
"""

import logging
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from timetracker.config import settings


logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async SQLAlchemy engine for ``database_url``."""
    return create_async_engine(database_url, echo=echo)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


# Create SQLAlchemy engine
engine = build_engine(settings.database_url_async, echo=settings.debug)

# Create session factory
AsyncSessionLocal = build_session_factory(engine)

# Create declarative base
Base = declarative_base()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function to get a database session.
    Commits when the request succeeds and rolls back otherwise.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_all_tables(bind: Optional[AsyncEngine] = None) -> None:
    """Create every table known to the metadata."""
    # Register models on the metadata
    from timetracker.infrastructure.db import models  # noqa: F401
    
    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")
