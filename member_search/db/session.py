"""
Engine and session management.

One process-wide AsyncEngine is created on first use from ``db.config.Settings``.
Request handlers get a session through ``get_async_session``; scripts use
``session_scope``.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, AsyncIterator, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .config import Settings, get_settings

_ENGINE: Optional[AsyncEngine] = None
_SESSION_MAKER: Optional[async_sessionmaker[AsyncSession]] = None


def _engine_options(settings: Settings) -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.SQL_ECHO}
    # aiosqlite connections are local files; only networked backends need a liveness ping.
    if not settings.async_database_url.startswith("sqlite"):
        options["pool_pre_ping"] = True
    return options


# PUBLIC_INTERFACE
def build_engine(settings: Optional[Settings] = None) -> AsyncEngine:
    """Create an AsyncEngine for ``settings`` (the environment's settings by default)."""
    settings = settings or get_settings()
    return create_async_engine(settings.async_database_url, **_engine_options(settings))


# PUBLIC_INTERFACE
def make_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory used everywhere in the service.

    Objects stay readable after commit (``expire_on_commit=False``); bulk
    statements reload the members a session holds themselves.
    """
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


def _session_maker() -> async_sessionmaker[AsyncSession]:
    global _ENGINE, _SESSION_MAKER
    if _SESSION_MAKER is None:
        _ENGINE = build_engine()
        _SESSION_MAKER = make_session_maker(_ENGINE)
    return _SESSION_MAKER


# PUBLIC_INTERFACE
def get_engine() -> AsyncEngine:
    """Return the process-wide AsyncEngine, creating it on first use."""
    _session_maker()
    assert _ENGINE is not None
    return _ENGINE


# PUBLIC_INTERFACE
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with _session_maker()() as session:
        yield session


# PUBLIC_INTERFACE
@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Session for scripts and startup tasks; rolled back if the block raises."""
    async with _session_maker()() as session:
        try:
            yield session
        except BaseException:
            await session.rollback()
            raise


# PUBLIC_INTERFACE
async def dispose_engine() -> None:
    """Dispose the process-wide engine; the next use creates a fresh one."""
    global _ENGINE, _SESSION_MAKER
    if _ENGINE is not None:
        await _ENGINE.dispose()
    _ENGINE = None
    _SESSION_MAKER = None
