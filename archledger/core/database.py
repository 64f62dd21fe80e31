"""Database connection and session management."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from archledger.core.config import get_settings
from archledger.core.structured_logging import log_json

settings = get_settings()
logger = logging.getLogger(__name__)


def _async_url(url: str) -> str:
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


# Create async engine
# Use NullPool for testing environments to avoid connection pool issues
engine = create_async_engine(
    _async_url(settings.database_url),
    echo=False,
    poolclass=NullPool if "test" in settings.database_url else None,
)

_slow_query_threshold_ms = float(os.getenv("SLOW_QUERY_MS", "0") or "0")
if _slow_query_threshold_ms > 0:

    @event.listens_for(engine.sync_engine, "before_cursor_execute")
    def _before_cursor_execute(
        conn, cursor, statement, parameters, context, executemany
    ) -> None:
        context._query_start_time = time.perf_counter()

    @event.listens_for(engine.sync_engine, "after_cursor_execute")
    def _after_cursor_execute(
        conn, cursor, statement, parameters, context, executemany
    ) -> None:
        start = getattr(context, "_query_start_time", None)
        if start is None:
            return

        duration_ms = (time.perf_counter() - start) * 1000
        if duration_ms < _slow_query_threshold_ms:
            return

        max_len = 2000
        stmt = str(statement)
        if len(stmt) > max_len:
            stmt = stmt[: max_len - 3] + "..."

        log_json(
            logger,
            logging.WARNING,
            "slow_query",
            duration_ms=round(duration_ms, 2),
            statement=stmt,
        )

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncSession:
    """Get database session dependency.

    Yields:
        AsyncSession: Database session

    Usage:
        @app.get("/endpoint")
        async def endpoint(db: AsyncSession = Depends(get_db)):
            # Use db session
            pass
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory dependency for work that must outlive the request session."""
    return AsyncSessionLocal


@asynccontextmanager
async def isolated_session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Session factory on a private, unpooled engine for one event loop.

    Worker tasks run each job under a fresh ``asyncio.run``; pooled asyncpg
    connections must not outlive the loop that opened them.
    """
    task_engine = create_async_engine(_async_url(settings.database_url), echo=False, poolclass=NullPool)
    try:
        yield async_sessionmaker(
            task_engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    finally:
        await task_engine.dispose()


async def insert_ignore_duplicates(
    db: AsyncSession,
    model: type,
    values: dict[str, Any],
    conflict_columns: list[str],
) -> bool:
    """Insert a row unless one with the same conflict columns already exists.

    Emits ``INSERT ... ON CONFLICT DO NOTHING`` so a concurrent duplicate is
    absorbed by the database instead of aborting the surrounding transaction.

    Returns:
        True if a row was inserted, False if it already existed
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise NotImplementedError(f"insert_ignore_duplicates does not support {dialect}")

    stmt = insert(model.__table__).values(**values).on_conflict_do_nothing(
        index_elements=conflict_columns
    )
    result = await db.execute(stmt)
    return bool(result.rowcount)
