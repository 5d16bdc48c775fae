"""
Database session management.

Provides engine initialization and async session factories for the API
(dependency-injected sessions) and the worker (context-managed sessions).
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_database(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Initialize the global engine and session factory.

    Args:
        database_url: SQLAlchemy async database URL.
        echo: Whether to log emitted SQL.

    Returns:
        The created async engine.
    """
    global _engine, _session_factory

    _engine = create_async_engine(database_url, echo=echo, pool_pre_ping=True)
    _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)
    return _engine


async def close_database() -> None:
    """Dispose the global engine."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


def _get_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError("Database not initialized")
    return _session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a database session (FastAPI dependency).

    Yields:
        Async database session, rolled back if the request fails.
    """
    async with _get_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession, None]:
    """Context-managed session for worker tasks and scripts."""
    async with _get_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
