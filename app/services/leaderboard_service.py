"""
LeaderboardService - Ranks contributors by verified-project activity.

The store hands back raw per-login aggregates; ranking, filtering and
ecosystem grouping happen here so the algorithm does not depend on the
storage engine.
"""

import logging
import re
from collections import defaultdict
from typing import Any, Mapping, Optional, Union
from uuid import UUID

from pydantic import ValidationError

from app.models.leaderboard import ContributorActivity, LeaderboardEntry
from app.repositories.contribution_repository import (
    ContributionStore,
    DataSourceUnavailable,
)

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 100

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class LeaderboardServiceError(Exception):
    """Base exception for leaderboard service errors."""
    pass


class RowDecodeError(LeaderboardServiceError):
    """Raised when a single store record cannot be decoded."""
    pass


def normalize_limit(limit: Union[int, str, None]) -> int:
    """
    Clamp the requested limit.

    Missing, non-numeric or non-positive values fall back to 10;
    anything above 100 is capped at 100.
    """
    if limit is None:
        return DEFAULT_LIMIT

    if isinstance(limit, str):
        if not _INTEGER_RE.fullmatch(limit):
            return DEFAULT_LIMIT
        value = int(limit)
    elif isinstance(limit, int) and not isinstance(limit, bool):
        value = limit
    else:
        return DEFAULT_LIMIT

    if value < 1:
        return DEFAULT_LIMIT
    if value > MAX_LIMIT:
        return MAX_LIMIT
    return value


def _decode_activity(record: Mapping[str, Any], contribution_count: int) -> ContributorActivity:
    user_id = record.get("user_id")
    if isinstance(user_id, UUID):
        user_id = str(user_id)

    try:
        return ContributorActivity(
            login=record.get("login"),
            avatar_url=record.get("avatar_url"),
            user_id=user_id,
            contribution_count=contribution_count,
        )
    except ValidationError as e:
        raise RowDecodeError(f"Malformed account record {record.get('login')!r}") from e


def _decode_count(record: Mapping[str, Any]) -> tuple[str, int]:
    login = record.get("login")
    count = record.get("contribution_count")
    if not isinstance(login, str) or not login:
        raise RowDecodeError(f"Malformed contribution record: login={login!r}")
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise RowDecodeError(f"Malformed contribution record for {login!r}: count={count!r}")
    return login, count


async def _contribution_counts(store: ContributionStore) -> dict[str, int]:
    counts: dict[str, int] = defaultdict(int)
    for record in await store.fetch_contribution_counts():
        try:
            login, count = _decode_count(record)
        except RowDecodeError as e:
            logger.warning("Skipping contribution record: %s", e)
            continue
        counts[login] += count
    return counts


async def _ecosystems_by_login(store: ContributionStore) -> dict[str, set[str]]:
    by_login: dict[str, set[str]] = defaultdict(set)
    for record in await store.fetch_ecosystem_links():
        login = record.get("login")
        name = record.get("ecosystem")
        if not isinstance(login, str) or not isinstance(name, str):
            logger.warning("Skipping ecosystem record: login=%r ecosystem=%r", login, name)
            continue
        by_login[login].add(name)
    return by_login


class ContributionRanker:
    def __init__(self, store: Optional[ContributionStore]):
        self.store = store

    async def compute_leaderboard(self, limit: Union[int, str, None] = DEFAULT_LIMIT) -> list[LeaderboardEntry]:
        """
        Build the contributor leaderboard.

        - Contributions = issues + PRs in verified projects
        - Accounts with zero contributions are dropped
        - Sorted by contributions desc, then login asc
        - Ranks are dense and start at 1

        All reads go through one store snapshot. Raises DataSourceUnavailable
        if no store is configured; store errors (DataSourceUnavailable,
        FetchFailed) propagate untouched.
        """
        if self.store is None:
            raise DataSourceUnavailable("Contribution store is not configured")

        effective_limit = normalize_limit(limit)

        async with self.store.snapshot() as store:
            counts = await _contribution_counts(store)
            accounts = await store.fetch_accounts()

            contributors: list[ContributorActivity] = []
            for record in accounts:
                login = record.get("login")
                if not isinstance(login, str) or not login:
                    logger.warning("Skipping account record: login=%r", login)
                    continue
                count = counts.get(login, 0)
                if count == 0:
                    continue
                try:
                    contributors.append(_decode_activity(record, count))
                except RowDecodeError as e:
                    logger.warning("Skipping account record: %s", e)

            contributors.sort(key=lambda c: (-c.contribution_count, c.login))
            contributors = contributors[:effective_limit]

            ecosystems = await _ecosystems_by_login(store) if contributors else {}

        return [
            LeaderboardEntry(
                rank=rank,
                username=c.login,
                avatar=c.avatar_url or "",
                user_id=c.user_id,
                contribution_count=c.contribution_count,
                ecosystems=sorted(ecosystems.get(c.login, ())),
                score=c.contribution_count,
                trend="same",
                trend_value=0,
            )
            for rank, c in enumerate(contributors, start=1)
        ]
