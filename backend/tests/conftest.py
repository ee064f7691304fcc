"""
After School Lessons Backend — Test Configuration (conftest.py)
=================================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── database:        Database on a throwaway SQLite file, schema created
    ├── sample_lessons:  LessonCreate objects for seeding
    ├── seeded_lessons:  sample_lessons stored, returned as ORM rows
    ├── images_dir:      temporary images directory with one SVG in it
    ├── test_client:     HTTPX AsyncClient bound to an app using `database`
    └── mock_db_session: AsyncMock session for store-failure tests
"""

import os
from typing import AsyncGenerator, List
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from afterschool.database import Database
from afterschool.models.lesson import Lesson
from afterschool.repositories import LessonRepository
from afterschool.schemas.lesson import LessonCreate


# ══════════════════════════════════════════════════════════════════════════
# Store Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """
    A real store on a per-test SQLite file.

    Every test starts from empty `lessons` and `orders` tables.
    """
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_schema()
    yield db
    await db.dispose()


@pytest.fixture
def sample_lessons() -> List[LessonCreate]:
    """Five lessons with distinct spaces so search-by-number is unambiguous."""
    return [
        LessonCreate(subject="Mathematics", location="Hendon", price=100, spaces=5,
                     icon="fa-calculator", image="mathematics.svg"),
        LessonCreate(subject="English Literature", location="Colindale", price=80, spaces=4,
                     icon="fa-book"),
        LessonCreate(subject="Science", location="Brent Cross", price=90, spaces=3,
                     icon="fa-flask"),
        LessonCreate(subject="Art & Design", location="Hendon", price=75, spaces=2,
                     icon="fa-palette"),
        LessonCreate(subject="Chemistry", location="Golders Green", price=92.5, spaces=0,
                     icon="fa-atom"),
    ]


@pytest_asyncio.fixture
async def seeded_lessons(database, sample_lessons) -> List[Lesson]:
    """`sample_lessons` stored in order; returns the rows as listed."""
    async with database.session() as session:
        repo = LessonRepository(session)
        await repo.replace_all(sample_lessons)
        return await repo.list()


@pytest.fixture
def images_dir(tmp_path) -> str:
    """An images directory holding `mathematics.svg`."""
    path = tmp_path / "images"
    path.mkdir()
    (path / "mathematics.svg").write_text("<svg xmlns='http://www.w3.org/2000/svg'/>")
    return str(path)


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(database, images_dir):
    """
    The FastAPI app wired to the test `database`.

    ASGITransport does not run the lifespan, so the store is injected here.
    """
    from afterschool.main import create_app
    return create_app(database=database, images_dir=images_dir)


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient that routes requests straight into the app.

    Usage:
        async def test_lessons(test_client):
            response = await test_client.get("/lessons")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_db_session():
    """
    A mock async session for simulating store failures.

    Usage:
        mock_db_session.execute.side_effect = OperationalError("SELECT 1", {}, Exception())
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    return session
