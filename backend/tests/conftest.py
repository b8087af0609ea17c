"""
World API Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite file (sqlite+aiosqlite) under tmp_path,
       a schema built from the ORM models and a small seeded world dataset.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy:
    world_enumeration      "single_query" (test_world.py overrides it)
    └── test_settings      Settings pointing at the per-test database
        └── app            create_app(test_settings), schema + seed data
            ├── db_session AsyncSession for store/gate unit tests
            └── test_client HTTPX AsyncClient over ASGITransport

Seed data:
    country: AFG Afghanistan, ATL Atlantis (no cities), JPN Japan, NLD Netherlands
    city:    1 Kabul, 2 Tokyo, 3 Osaka, 4 Akita, 5 Amsterdam,
             6 Springfield (every column but the name is NULL),
             7 Springfield (NLD)
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set before worldapi.main builds its module-level app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["LOG_LEVEL"] = "WARNING"

from worldapi.config import Settings  # noqa: E402
from worldapi.main import create_app  # noqa: E402
from worldapi.models import City, Country  # noqa: E402

TEST_SECRET = "test-session-secret"

COUNTRIES = [
    dict(code="AFG", name="Afghanistan", continent="Asia", region="Southern and Central Asia"),
    dict(code="ATL", name="Atlantis"),
    dict(code="JPN", name="Japan", continent="Asia", region="Eastern Asia"),
    dict(code="NLD", name="Netherlands", continent="Europe", region="Western Europe"),
]

CITIES = [
    dict(id=1, name="Kabul", country_code="AFG", district="Kabol", population=1780000),
    dict(id=2, name="Tokyo", country_code="JPN", district="Tokyo-to", population=7980230),
    dict(id=3, name="Osaka", country_code="JPN", district="Osaka", population=2595674),
    dict(id=4, name="Akita", country_code="JPN", district="Akita", population=314440),
    dict(id=5, name="Amsterdam", country_code="NLD", district="Noord-Holland", population=731200),
    dict(id=6, name="Springfield"),
    dict(id=7, name="Springfield", country_code="NLD", district="Utrecht", population=1000),
]

TOKYO_JSON = {
    "id": 2,
    "name": "Tokyo",
    "countryCode": "JPN",
    "district": "Tokyo-to",
    "population": 7980230,
}


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def world_enumeration() -> str:
    return "single_query"


@pytest.fixture
def test_settings(tmp_path, world_enumeration) -> Settings:
    """
    Settings for one test.

    bcrypt runs at its minimum cost so signup/login tests stay fast.
    """
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'world.db'}",
        session_secret=TEST_SECRET,
        bcrypt_rounds=4,
        world_enumeration=world_enumeration,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(test_settings):
    """A fresh application with its schema created and the world data seeded."""
    application = create_app(test_settings)
    database = application.state.database
    await database.create_all()

    async with database.session() as session:
        session.add_all([Country(**row) for row in COUNTRIES])
        await session.flush()
        session.add_all([City(**row) for row in CITIES])
        await session.commit()

    yield application

    await database.dispose()


@pytest_asyncio.fixture
async def db_session(app):
    """An AsyncSession on the test database, for store and gate unit tests."""
    async with app.state.database.session() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient routed straight into the app.

    The client keeps cookies between requests, so a login carries over to
    later calls on the same client.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def signup_and_login(client: AsyncClient, username: str = "alice", password: str = "s3cret"):
    """Create an account and log in; returns the login response."""
    response = await client.post("/signup", json={"username": username, "password": password})
    assert response.status_code == 201
    response = await client.post("/login", json={"username": username, "password": password})
    assert response.status_code == 200
    return response
