from .contribution_repository import (
    ContributionRepository,
    ContributionStore,
    ContributionStoreError,
    DataSourceUnavailable,
    FetchFailed,
)

__all__ = [
    "ContributionRepository",
    "ContributionStore",
    "ContributionStoreError",
    "DataSourceUnavailable",
    "FetchFailed",
]
