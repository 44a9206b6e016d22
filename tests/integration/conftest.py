"""
Fixtures for integration tests
"""

from contextlib import asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.database import get_contribution_store
from app.repositories.contribution_repository import ContributionRepository


@pytest.fixture
async def client(test_engine):
    """
    HTTP client for testing API endpoints.

    Overrides the store dependency with the test database.
    """
    async def override_get_store():
        return ContributionRepository(test_engine)

    app.dependency_overrides[get_contribution_store] = override_get_store

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def unconfigured_client():
    """HTTP client for an app with no database configured."""
    async def override_get_store():
        return None

    app.dependency_overrides[get_contribution_store] = override_get_store

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def failing_client_factory():
    """
    Build a client whose store raises the given error on every read.
    """
    class FailingStore:
        def __init__(self, error):
            self.error = error

        @asynccontextmanager
        async def snapshot(self):
            yield self

        async def fetch_accounts(self):
            raise self.error

        async def fetch_contribution_counts(self):
            raise self.error

        async def fetch_ecosystem_links(self):
            raise self.error

    def factory(error):
        async def override_get_store():
            return FailingStore(error)

        app.dependency_overrides[get_contribution_store] = override_get_store
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    yield factory

    app.dependency_overrides.clear()
