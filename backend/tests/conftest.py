"""
Test fixtures shared across all tests.

Architecture:
- The suite runs against a throwaway SQLite file (aiosqlite driver). The
  environment is set up HERE, before the app is imported, because
  settings and the engine are created at import time.
- pyproject.toml sets the asyncio loop scope to "session" so all tests
  share ONE event loop.
- The HTTP test client uses the real FastAPI app with its own sessions.
- The user_manuals table is emptied before every test that touches the
  database, so counts and page numbers are exact.
"""

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="manual_api_tests_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["MUTATION_NOT_FOUND_STATUS"] = "404"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import delete  # noqa: E402

from manual_api.database import AsyncSessionLocal, Base, engine  # noqa: E402
from manual_api.main import app  # noqa: E402
from manual_api.models import UserManual  # noqa: E402
from manual_api.security import create_access_token  # noqa: E402
from manual_api.services.store import ManualStore  # noqa: E402


@pytest_asyncio.fixture(scope="session")
async def setup_db():
    """Create all tables once before the test session."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest_asyncio.fixture
async def clean_db(setup_db):
    """Empty the manuals table, including soft-deleted rows."""
    async with AsyncSessionLocal() as session:
        await session.execute(delete(UserManual))
        await session.commit()
    yield


@pytest_asyncio.fixture
async def client(clean_db):
    """Async HTTP test client over the real app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session(clean_db):
    """A session of our own, for store-level tests."""
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
def auth_headers():
    """Bearer header for an authenticated writer."""
    token = create_access_token("testuser@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def manual_data():
    """A valid create payload."""
    return {
        "title": "Dishwasher DW-200 Installation Guide",
        "serial_number": 40170725,
        "description": "Step-by-step installation and first run.",
        "video_link": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    }


# --- Seed data fixtures ---
# Records are written through the store with their own session and
# committed, so the app's sessions see them.

@pytest_asyncio.fixture
async def make_manual(clean_db):
    """Factory: ``await make_manual(title=...)`` creates and returns a manual."""
    counter = {"n": 0}

    async def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "title": f"Seeded Manual {n:03d}",
            "serial_number": 10000000 + n,
            "description": f"Description of seeded manual {n}.",
            "video_link": "https://www.youtube.com/watch?v=abcdefghijk",
        }
        fields.update(overrides)
        async with AsyncSessionLocal() as session:
            return await ManualStore(session).create(fields)

    return _make


@pytest_asyncio.fixture
async def test_manual(make_manual):
    """One live manual."""
    return await make_manual(title="Original Title")
