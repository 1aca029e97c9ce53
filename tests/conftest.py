"""
NoteTaker Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the test suite.
How:   Integration fixtures run the real NoteService against a throwaway
       SQLite file (aiosqlite driver) and inject it into a fresh app, the
       same way the lifespan does in production. Unit fixtures provide a
       mocked session factory for failure paths.

Fixture Hierarchy (all function-scoped):
    ├── engine:               async engine on tmp_path/notes.db, schema created
    ├── note_service:         NoteService bound to `engine`
    ├── app:                  create_app() with engine + service on app.state
    ├── test_client:          HTTPX AsyncClient over ASGITransport
    ├── mock_session:         AsyncMock standing in for AsyncSession
    └── mock_session_factory: callable returning `mock_session` as a context
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

# Must be set before notetaker.config is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["PUBLIC_DIR"] = tempfile.mkdtemp(prefix="notetaker_public_")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from notetaker.config import Settings
from notetaker.database import build_engine, create_schema, dispose_engine
from notetaker.main import create_app
from notetaker.services.note_service import NoteService


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a per-test SQLite file and public directory."""
    public_dir = tmp_path / "public"
    public_dir.mkdir()
    (public_dir / "index.html").write_text("<h1>NoteTaker</h1>", encoding="utf-8")
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}",
        public_dir=str(public_dir),
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def engine(test_settings):
    """Async engine with the notes table created; disposed after the test."""
    engine = build_engine(test_settings)
    await create_schema(engine)
    yield engine
    await dispose_engine(engine)


@pytest_asyncio.fixture
async def note_service(engine):
    return NoteService(engine)


@pytest.fixture
def app(test_settings, engine, note_service):
    """
    A fresh application wired to the test engine.

    ASGITransport does not run the lifespan, so the fixture attaches the
    engine and service itself.
    """
    application = create_app(test_settings)
    application.state.engine = engine
    application.state.note_service = note_service
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed directly into the app.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/notes")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_session():
    """AsyncMock simulating AsyncSession (execute, commit, add)."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_session_factory(mock_session):
    """
    Callable used as `async with factory() as session`.

    __aexit__ returns False so exceptions raised inside the block propagate.
    """
    factory = MagicMock()
    factory.return_value.__aenter__.return_value = mock_session
    factory.return_value.__aexit__.return_value = False
    return factory


@pytest.fixture
def mock_engine():
    engine = MagicMock()
    engine.dialect.name = "postgresql"
    return engine
