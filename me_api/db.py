"""SQLAlchemy 2.x async database setup.

The engine and session factory are built from settings at application
startup and kept on ``app.state``; nothing connects at import time.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .config import DatabaseSettings
from .models import Base

logger = logging.getLogger(__name__)


def build_engine(config: DatabaseSettings) -> AsyncEngine:
    """Create the async engine for the configured URL."""
    options: dict = {"echo": config.echo}
    if not config.is_sqlite:
        options.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_pre_ping=True,
        )
    return create_async_engine(config.url, **options)


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


async def create_tables(engine: AsyncEngine) -> None:
    """Create any missing tables. Existing tables are left untouched."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Database schema ready: {', '.join(Base.metadata.tables.keys())}")


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI-friendly async session dependency.

    Usage:
        async def endpoint(session: AsyncSession = Depends(get_session)):
            ...
    """

    session_maker: async_sessionmaker[AsyncSession] = request.app.state.session_maker
    async with session_maker() as session:
        yield session
