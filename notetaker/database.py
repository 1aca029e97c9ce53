"""
NoteTaker Backend: Database Engine Management
==============================================

What:  Builds the async SQLAlchemy engine (the connection pool), its session
       factory, and the declarative base for ORM models.
How:   Nothing is created at import time. The application lifespan calls
       `build_engine()` once, hands the engine to NoteService, and calls
       `dispose_engine()` on shutdown. Tests build their own engine against
       SQLite and inject it the same way.

Connection Pooling:
    pool_size / max_overflow: persistent plus burst connections (Postgres)
    pool_pre_ping:            validate connections before use
    pool_recycle=3600:        recycle connections hourly
    SQLite URLs use SQLAlchemy's default pool and skip the sizing options.
"""

import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notetaker.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine described by `settings`.

    Args:
        settings: Application settings; `sqlalchemy_url` selects the store.

    Returns:
        An AsyncEngine owning the connection pool. The caller disposes it.
    """
    url = settings.sqlalchemy_url
    options = {
        # Why: SQL echo is only useful while debugging; it floods INFO logs
        "echo": settings.log_level == "DEBUG",
    }
    # Why skip SQLite: its default pool (per-file or singleton) rejects
    # pool_size/max_overflow, and a local file has no stale connections
    if make_url(url).get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            # Catches connections dropped by a database restart before use
            pool_pre_ping=settings.db_pool_pre_ping,
            # Hourly recycle stays under typical server-side idle timeouts
            pool_recycle=3600,
        )

    engine = create_async_engine(url, **options)
    logger.info(
        "Database engine created: %s",
        make_url(url).render_as_string(hide_password=True),
    )
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False keeps attributes readable after commit, which
    create_note relies on to read the assigned id.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create every table registered on Base.metadata that does not exist yet."""
    # Models must be imported so they register with Base
    from notetaker.models.note import Note  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured")


async def dispose_engine(engine: AsyncEngine) -> None:
    """Close every pooled connection. Called on application shutdown."""
    await engine.dispose()
