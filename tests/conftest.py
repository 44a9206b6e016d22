"""
Pytest fixtures and configuration for all tests.
"""

import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import pytest
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import create_tables
from app.models.tables import (
    ecosystems,
    github_accounts,
    github_issues,
    github_pull_requests,
    projects,
    users,
)

# In-memory SQLite shared through a single pooled connection
TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Provide a fresh in-memory database with the leaderboard schema.

    Each test gets its own engine, so nothing leaks between tests.
    """
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)

    yield engine

    await engine.dispose()


class ContributionSeeder:
    """Small helper to insert accounts, projects and activity."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def _insert(self, table, rows: list[dict]) -> None:
        if not rows:
            return
        async with self.engine.begin() as conn:
            await conn.execute(insert(table), rows)

    async def _insert_one(self, table, values: dict) -> int:
        async with self.engine.begin() as conn:
            result = await conn.execute(insert(table).values(**values))
            return result.inserted_primary_key[0]

    async def account(self, login: str, avatar_url: Optional[str] = None) -> str:
        """Create a user + linked GitHub account; returns the user id."""
        user_id = str(uuid.uuid4())
        await self._insert_one(users, {"id": user_id})
        await self._insert_one(github_accounts, {
            "user_id": user_id,
            "login": login,
            "avatar_url": avatar_url,
        })
        return user_id

    async def ecosystem(self, name: str, status: str = "active") -> int:
        return await self._insert_one(ecosystems, {"name": name, "status": status})

    async def project(self, ecosystem_id: Optional[int], status: str = "verified") -> int:
        return await self._insert_one(projects, {"ecosystem_id": ecosystem_id, "status": status})

    async def issues(self, login: Optional[str], project_id: int, count: int = 1) -> None:
        await self._insert(github_issues, [
            {"project_id": project_id, "author_login": login} for _ in range(count)
        ])

    async def pull_requests(self, login: Optional[str], project_id: int, count: int = 1) -> None:
        await self._insert(github_pull_requests, [
            {"project_id": project_id, "author_login": login} for _ in range(count)
        ])


@pytest.fixture
async def seeder(test_engine) -> ContributionSeeder:
    return ContributionSeeder(test_engine)


class FakeContributionStore:
    """In-memory ContributionStore for service tests."""

    def __init__(
        self,
        accounts: Optional[list[dict[str, Any]]] = None,
        counts: Optional[list[dict[str, Any]]] = None,
        ecosystem_links: Optional[list[dict[str, Any]]] = None,
        error: Optional[Exception] = None,
    ):
        self.accounts = accounts or []
        self.counts = counts or []
        self.ecosystem_links = ecosystem_links or []
        self.error = error
        self.calls: list[str] = []
        self.snapshots = 0

    @asynccontextmanager
    async def snapshot(self):
        self.snapshots += 1
        yield self

    async def _read(self, name: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        self.calls.append(name)
        if self.error is not None:
            raise self.error
        return [dict(r) for r in rows]

    async def fetch_accounts(self):
        return await self._read("accounts", self.accounts)

    async def fetch_contribution_counts(self):
        return await self._read("counts", self.counts)

    async def fetch_ecosystem_links(self):
        return await self._read("ecosystem_links", self.ecosystem_links)


@pytest.fixture
def sample_store_data():
    """Two verified contributors plus one account with no activity."""
    return {
        "accounts": [
            {"login": "alice", "avatar_url": "https://example.com/alice.png", "user_id": "u-alice"},
            {"login": "bob", "avatar_url": None, "user_id": "u-bob"},
            {"login": "carol", "avatar_url": "", "user_id": "u-carol"},
        ],
        "counts": [
            {"login": "alice", "contribution_count": 7},
            {"login": "bob", "contribution_count": 3},
        ],
        "ecosystem_links": [
            {"login": "alice", "ecosystem": "npm"},
            {"login": "alice", "ecosystem": "cargo"},
            {"login": "bob", "ecosystem": "npm"},
        ],
    }


@pytest.fixture
def make_store():
    """Factory for FakeContributionStore instances."""
    return FakeContributionStore
