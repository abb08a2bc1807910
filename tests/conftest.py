"""
GhostNote Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:  AsyncMock session for failure-path unit tests
    ├── db_engine:        async SQLite engine on a temp file, schema created
    ├── session_factory:  async_sessionmaker bound to db_engine
    ├── db_session:       one real AsyncSession
    ├── test_app:         fresh FastAPI app with get_db_session overridden
    ├── test_client:      HTTPX AsyncClient with a valid bearer token
    └── anon_client:      HTTPX AsyncClient without an Authorization header
"""

import os
import tempfile

# Override settings for testing BEFORE any ghostnote imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="ghostnote_test_"), "default.db"
)
os.environ["AUTH_TOKEN"] = "test-token"
os.environ["REQUIRE_AUTH"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ghostnote.database import Base, get_db_session  # noqa: E402
from ghostnote.models.note import Note  # noqa: E402,F401

TEST_TOKEN = "test-token"
AUTH_HEADERS = {"Authorization": f"Bearer {TEST_TOKEN}"}


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_result = MagicMock()
        mock_result.one_or_none.return_value = None
        mock_db_session.execute.return_value = mock_result
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """
    A real async SQLite database in a temp file with the schema created.

    A file (not :memory:) so concurrent sessions get separate connections
    and see each other's commits.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ghostnote.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def test_app(session_factory):
    """Fresh app whose session dependency uses the per-test database."""
    from ghostnote.main import create_app

    app = create_app()

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    return app


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient routed straight into the app, authenticated.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/list")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=AUTH_HEADERS
    ) as client:
        yield client


@pytest_asyncio.fixture
async def anon_client(test_app):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def image_note_payload():
    """A complete, valid image note as the client would send it."""
    return {
        "content": "ct1",
        "has_image": 1,
        "image_data": "base64img",
        "image_type": "image/png",
        "image_iv": "[1,2,3]",
    }
