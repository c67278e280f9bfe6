"""
Database connection management.

Async engine, session factory and the FastAPI dependency yielding one
session per request.

Dependencies: sqlalchemy, entity_images.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from entity_images.configs import get_settings


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Create the process-wide async engine from database settings.

    Connections are pinged before use so stale pool entries are replaced.
    """
    db_config = get_settings().database

    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory() -> async_sessionmaker:
    """
    Session factory bound to the engine.

    autoflush is off so processors decide when records reach the database;
    expire_on_commit is off so image relationships stay readable after a
    commit without another round trip.
    """
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a request-scoped session.

    Yields:
        AsyncSession: Session closed when the request ends
    """
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        yield session
