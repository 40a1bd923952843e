# tests/conftest.py
import asyncio
import os
import tempfile

# Point the app at a throwaway SQLite file before any app module reads settings.
_DB_PATH = os.path.join(tempfile.mkdtemp(prefix="attendance-tests-"), "attendance_test.db")
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.db.session import AsyncSessionLocal, reset_db  # noqa: E402
from app.main import create_app  # noqa: E402


@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    Shared TestClient fixture for all API tests.

    Uses the application factory so configuration (DB, deps, etc.)
    remains test-friendly.
    """
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def clean_db() -> None:
    """
    Reset the schema before a synchronous (TestClient) test.
    """
    asyncio.run(reset_db())


@pytest_asyncio.fixture()
async def db_session():
    """
    Fresh schema plus an AsyncSession for service/repository tests.
    """
    await reset_db()
    async with AsyncSessionLocal() as session:
        yield session
