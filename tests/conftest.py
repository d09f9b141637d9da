"""
Shared fixtures for the garage tracker test suite.

Each test gets its own SQLite file under tmp_path, so tests never share
state. API tests pin "today" to TODAY through the get_today dependency.
"""

import os

# Must be set before garage_tracker is imported: the limiter reads it at import time
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import date

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from garage_tracker.api.deps import get_today
from garage_tracker.core.setting import Settings
from garage_tracker.db.session import Database
from garage_tracker.main import create_app

TEST_SECRET = "test-secret-for-the-garage-tracker-suite"
TODAY = date(2024, 6, 15)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        JWT_SECRET=TEST_SECRET,
        RATE_LIMIT_ENABLED=False,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def app(test_settings):
    application = create_app(test_settings)
    application.dependency_overrides[get_today] = lambda: TODAY
    return application


@pytest.fixture
def client(app):
    # Context manager runs startup (table creation) and shutdown
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def signup(client):
    """Sign up an account and return its bearer headers."""

    def _signup(email: str = "a@x.com", password: str = "pw123", garage_name: str = "Bob's Garage") -> dict:
        response = client.post(
            "/api/auth/signup",
            json={"email": email, "password": password, "garageName": garage_name},
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _signup


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'service.db'}")
    await db.create_tables()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database):
    async with database.session_maker() as db_session:
        yield db_session
