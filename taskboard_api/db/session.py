from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Union
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .config import get_settings


_ENGINE: AsyncEngine | None = None
_SESSION_MAKER: async_sessionmaker[AsyncSession] | None = None


def _ensure_engine_initialized() -> None:
    """
    Lazily initialize the AsyncEngine and session maker.
    """
    global _ENGINE, _SESSION_MAKER
    if _ENGINE is None:
        settings = get_settings()
        options = {"echo": settings.SQL_ECHO, "pool_pre_ping": True}
        if settings.is_postgres:
            options["pool_size"] = settings.SQL_POOL_SIZE
        _ENGINE = create_async_engine(settings.async_database_url, **options)
    if _SESSION_MAKER is None:
        _SESSION_MAKER = async_sessionmaker(
            bind=_ENGINE, expire_on_commit=False, autoflush=False, autocommit=False
        )


# PUBLIC_INTERFACE
async def dispose_engine() -> None:
    """Dispose the global engine and forget the session factory."""
    global _ENGINE, _SESSION_MAKER
    if _ENGINE is not None:
        await _ENGINE.dispose()
    _ENGINE = None
    _SESSION_MAKER = None


# PUBLIC_INTERFACE
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield an AsyncSession suitable for FastAPI dependency injection.
    Ensures engine/session factory is initialized.
    """
    _ensure_engine_initialized()
    assert _SESSION_MAKER is not None
    async with _SESSION_MAKER() as session:
        yield session


# PUBLIC_INTERFACE
async def set_current_company(
    session: AsyncSession, company_id: Union[str, UUID]
) -> None:
    """
    Set the current company for the DB session using a custom GUC.

    Row-Level Security policies reference current_setting('app.company_id', true).
    """
    await session.execute(
        text("SELECT set_config('app.company_id', :company_id, false);"),
        {"company_id": str(company_id)},
    )


# PUBLIC_INTERFACE
@asynccontextmanager
async def company_context(
    session: AsyncSession, company_id: Union[str, UUID]
) -> AsyncGenerator[AsyncSession, None]:
    """
    Async context manager that sets and resets the company context on the session.

    Usage:
        async with company_context(session, company_id):
            # all queries inside are filtered by RLS
            ...
    """
    await set_current_company(session, company_id)
    try:
        yield session
    finally:
        # An empty company id matches no RLS policy, denying access.
        await session.execute(
            text("SELECT set_config('app.company_id', '', false);")
        )
