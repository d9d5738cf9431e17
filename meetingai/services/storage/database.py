"""
Local SQLite database for data kept on this device.

Streamlit runs each async action in its own ``asyncio.run`` loop, and an
aiosqlite connection cannot outlive the loop that opened it. The UI
therefore builds a short-lived engine per action with ``create_engine()``;
``get_engine()`` holds a process-wide engine for code that runs inside one
long-lived loop (scripts, tests).
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from meetingai.core.config import get_settings


class Base(DeclarativeBase):
    """Declarative base for the local store tables."""


_shared_engine: AsyncEngine | None = None


def ensure_sqlite_dir(db_url: str) -> None:
    """Create the parent folder of a file-backed SQLite database."""
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return
    if url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def create_engine(db_url: str | None = None) -> AsyncEngine:
    """Build a new async engine for *db_url* (settings default if None)."""
    db_url = db_url or get_settings().database_url
    ensure_sqlite_dir(db_url)
    return create_async_engine(db_url, echo=False)


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, building it on first use."""
    global _shared_engine
    if _shared_engine is None:
        _shared_engine = create_engine()
    return _shared_engine


def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@asynccontextmanager
async def get_session(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Open one unit of work: commit when the block exits cleanly, else roll back."""
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(engine: AsyncEngine) -> None:
    """Create missing tables; existing ones are left untouched."""
    from meetingai.services.storage import models_db  # noqa: F401  (registers tables)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose the process-wide engine so the next ``get_engine()`` rebuilds it."""
    global _shared_engine
    if _shared_engine is not None:
        await _shared_engine.dispose()
    _shared_engine = None
