"""Port: repository fetcher, defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from repo_scorer.domain.entities import RepositoryMetadata


class RepositoryFetcher(Protocol):
    """Abstract contract for listing an account's repositories with root trees."""

    async def fetch_repositories(
        self, account_handle: str, credential: str | None = None
    ) -> list[RepositoryMetadata]:
        """Return every repository of *account_handle*, in provider order."""
        ...
