"""
Async engine and session lifecycle.

One engine per process (cached), one AsyncSession per request via the
``get_async_db`` FastAPI dependency. The engine is disposed at shutdown.

Dependencies: sqlalchemy, asyncpg, rag_backend.configs
System role: Database connection management
"""

import logging
from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from rag_backend.configs import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Build the shared engine from POSTGRES_* settings.

    SQLite URLs (local runs) get no pool sizing; PostgreSQL gets the
    configured pool with pre-ping so dropped connections are replaced.
    """
    config = get_settings().database
    url = config.async_database_url

    if url.startswith("sqlite"):
        return create_async_engine(url, echo=config.echo_sql)

    logger.info(
        "Creating database engine",
        extra={"pool_size": config.pool_size, "max_overflow": config.max_overflow},
    )
    return create_async_engine(
        url,
        echo=config.echo_sql,
        pool_pre_ping=True,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
    )


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to the shared engine.

    expire_on_commit=False keeps stored chunks readable after the store
    commits, without a lazy reload.
    """
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a request-scoped session.

    Usage:
        def get_vector_store(db: AsyncSession = Depends(get_async_db)) -> PgVectorStore: ...
    """
    async with get_async_session_factory()() as session:
        yield session


async def ping_database() -> bool:
    """Round-trip ``SELECT 1``; raises on connection failure."""
    async with get_async_engine().connect() as conn:
        await conn.execute(text("SELECT 1"))
    return True


async def dispose_engine() -> None:
    """Close pooled connections and forget the cached engine."""
    if get_async_engine.cache_info().currsize:
        await get_async_engine().dispose()
    get_async_session_factory.cache_clear()
    get_async_engine.cache_clear()
