"""
ContributionRepository - SQL access for verified-project contributions.

Counts issues + pull requests per author login, restricted to verified
projects, and lists the active ecosystems each login has touched.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncContextManager, AsyncIterator, Mapping, NoReturn, Optional, Protocol

from sqlalchemy import func, select, union_all
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from sqlalchemy.sql import Select

from app.models.tables import (
    ECOSYSTEM_STATUS_ACTIVE,
    PROJECT_STATUS_VERIFIED,
    ecosystems,
    github_accounts,
    github_issues,
    github_pull_requests,
    projects,
    users,
)

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]


class ContributionStoreError(Exception):
    """Base exception for contribution store errors."""
    pass


class DataSourceUnavailable(ContributionStoreError):
    """Raised when the store is not configured or cannot be reached."""
    pass


class FetchFailed(ContributionStoreError):
    """Raised when a query fails to execute."""
    pass


class ContributionStore(Protocol):
    """Read capability the ranker needs, independent of the storage engine."""

    def snapshot(self) -> AsyncContextManager["ContributionStore"]:
        """Store view whose reads all see the same database state."""
        ...

    async def fetch_accounts(self) -> list[Record]:
        """One record per account: login, avatar_url, user_id."""
        ...

    async def fetch_contribution_counts(self) -> list[Record]:
        """One record per author login: login, contribution_count."""
        ...

    async def fetch_ecosystem_links(self) -> list[Record]:
        """Distinct (login, ecosystem) pairs over active ecosystems."""
        ...


def _contribution_events():
    """Issues and pull requests as one stream of (author_login, project_id)."""
    return union_all(
        select(github_issues.c.author_login, github_issues.c.project_id),
        select(github_pull_requests.c.author_login, github_pull_requests.c.project_id),
    ).subquery("contribution_events")


def accounts_query() -> Select:
    return select(
        github_accounts.c.login,
        github_accounts.c.avatar_url,
        users.c.id.label("user_id"),
    ).select_from(
        github_accounts.join(users, github_accounts.c.user_id == users.c.id)
    )


def contribution_counts_query() -> Select:
    events = _contribution_events()
    return (
        select(
            events.c.author_login.label("login"),
            func.count().label("contribution_count"),
        )
        .select_from(events.join(projects, events.c.project_id == projects.c.id))
        .where(
            projects.c.status == PROJECT_STATUS_VERIFIED,
            events.c.author_login.is_not(None),
        )
        .group_by(events.c.author_login)
    )


def ecosystem_links_query() -> Select:
    events = _contribution_events()
    return (
        select(
            events.c.author_login.label("login"),
            ecosystems.c.name.label("ecosystem"),
        )
        .select_from(
            events.join(projects, events.c.project_id == projects.c.id).join(
                ecosystems, projects.c.ecosystem_id == ecosystems.c.id
            )
        )
        .where(
            projects.c.status == PROJECT_STATUS_VERIFIED,
            ecosystems.c.status == ECOSYSTEM_STATUS_ACTIVE,
            events.c.author_login.is_not(None),
        )
        .distinct()
    )


class ContributionRepository:
    def __init__(self, engine: AsyncEngine, connection: Optional[AsyncConnection] = None):
        self.engine = engine
        self.connection = connection

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[AsyncConnection]:
        if self.connection is not None:
            yield self.connection
            return

        try:
            conn = await self.engine.connect()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Could not connect to contribution store: %s", e)
            raise DataSourceUnavailable("Contribution store is unreachable") from e

        try:
            yield conn
        finally:
            await conn.close()

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator["ContributionRepository"]:
        """
        Run the reads on one connection inside a single transaction.

        PostgreSQL gets REPEATABLE READ so the three reads share a snapshot;
        SQLite transactions are already serializable.
        """
        if self.connection is not None:
            yield self
            return

        async with self._connection() as conn:
            try:
                if conn.dialect.name == "postgresql":
                    await conn.execution_options(isolation_level="REPEATABLE READ")
                await conn.begin()
            except SQLAlchemyError as e:
                _raise_store_error(e)

            try:
                yield type(self)(self.engine, conn)
            finally:
                await conn.rollback()

    async def _fetch_all(self, statement: Select) -> list[Record]:
        async with self._connection() as conn:
            try:
                result = await conn.execute(statement)
            except SQLAlchemyError as e:
                _raise_store_error(e)

            return [dict(row) for row in result.mappings()]

    # ============================================
    # 📌 READ
    # ============================================

    async def fetch_accounts(self) -> list[Record]:
        return await self._fetch_all(accounts_query())

    async def fetch_contribution_counts(self) -> list[Record]:
        return await self._fetch_all(contribution_counts_query())

    async def fetch_ecosystem_links(self) -> list[Record]:
        return await self._fetch_all(ecosystem_links_query())


def _raise_store_error(e: SQLAlchemyError) -> NoReturn:
    if isinstance(e, DBAPIError) and e.connection_invalidated:
        logger.error("Lost connection to contribution store: %s", e)
        raise DataSourceUnavailable("Contribution store connection lost") from e
    logger.error("Contribution query failed: %s", e)
    raise FetchFailed("Contribution query failed") from e
