"""Shared test fixtures.

Engine, progress and notification tests run against ``InMemoryProgressStore``
(tests/fakes.py). Tests that need PostgreSQL live in tests/integration and
skip unless H2C_TEST_DATABASE_URL is set.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from h2c.achievements.catalog import Catalog
from h2c.achievements.seed import default_catalog
from tests.fakes import InMemoryProgressStore, InMemorySolveRecorder, RecordingRedis

# problem id -> (difficulty, tag)
PROBLEMS = {
    1: ("easy", "array"),
    2: ("easy", "array"),
    3: ("hard", "dp"),
}


@pytest.fixture
def seed_catalog() -> Catalog:
    return default_catalog()


@pytest.fixture
def store(seed_catalog: Catalog) -> InMemoryProgressStore:
    return InMemoryProgressStore(seed_catalog)


@pytest.fixture
def redis_spy() -> RecordingRedis:
    return RecordingRedis()


@pytest_asyncio.fixture
async def api_client(store: InMemoryProgressStore, redis_spy: RecordingRedis) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the progress store swapped for the in-memory one (no lifespan, no DB)."""
    from h2c.achievements.router import get_progress_store
    from h2c.main import create_app
    from h2c.problems.router import get_solve_recorder
    from h2c.redis_client import get_optional_redis

    app = create_app()
    app.dependency_overrides[get_progress_store] = lambda: store
    app.dependency_overrides[get_optional_redis] = lambda: redis_spy
    app.dependency_overrides[get_solve_recorder] = lambda: InMemorySolveRecorder(store, PROBLEMS, redis_spy)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers():
    """Build bearer headers for a user id."""
    from h2c.auth.jwt import create_access_token

    def _headers(user_id: int) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _headers
