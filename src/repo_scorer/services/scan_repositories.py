"""Scan-repositories use case: the fetch → score → persist pipeline.

This is the single entry point for the business logic.  It depends only on
the two ports (:class:`RepositoryFetcher` and :class:`ScanStore`) and the pure
scorer.  The interface layer injects concrete adapters at runtime.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from repo_scorer.domain.entities import RepositoryMetadata, ScanResult, ScoredRepository
from repo_scorer.domain.exceptions import ScanTimeoutError
from repo_scorer.domain.ports.repo_fetcher import RepositoryFetcher
from repo_scorer.domain.ports.scan_store import ScanStore
from repo_scorer.domain.value_objects import ScanRequest
from repo_scorer.services.quality_scorer import ReadmeProfile, score_repository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScanRepositoriesUseCase:
    """Orchestrates one scan of a GitHub account.

    Parameters
    ----------
    repo_fetcher:
        Adapter that lists an account's repositories with their root trees.
    scan_store:
        Adapter that persists finished scans and lists past ones.
    readme_profile:
        Quick-presentation threshold passed to the scorer.
    fetch_timeout:
        Seconds allowed for the whole fetch stage; ``None`` disables the limit.
    clock:
        Source of the scan timestamp (UTC).
    """

    def __init__(
        self,
        repo_fetcher: RepositoryFetcher,
        scan_store: ScanStore,
        readme_profile: ReadmeProfile = ReadmeProfile.LENIENT,
        fetch_timeout: float | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._fetcher = repo_fetcher
        self._store = scan_store
        self._profile = readme_profile
        self._fetch_timeout = fetch_timeout
        self._clock = clock

    # ── Public entry points ─────────────────────────────────────────────

    async def execute(self, account_identity: str, request: ScanRequest) -> ScanResult:
        """Fetch, score and store every repository of ``request.account_handle``.

        Any fetch failure propagates unchanged and nothing is stored.
        """
        logger.info("Scanning GitHub account %s", request.account_handle)

        repositories = await self._fetch(request)

        scanned_at = self._clock()
        scored = tuple(
            ScoredRepository.from_metadata(
                repo, score_repository(repo, profile=self._profile), scanned_at
            )
            for repo in repositories
        )
        result = ScanResult(
            account_handle=request.account_handle,
            total_repositories=len(repositories),
            repositories=scored,
            scanned_at=scanned_at,
        )

        stored = await self._store.persist_scan(account_identity, result)
        logger.info(
            "Scan of %s finished: %d repositories, average score %.1f",
            request.account_handle,
            stored.total_repositories,
            _average_score(stored),
        )
        return stored

    async def history(self, account_identity: str) -> list[ScanResult]:
        """Past scans of *account_identity*, newest first."""
        return await self._store.list_scans(account_identity)

    # ── Fetch stage ─────────────────────────────────────────────────────

    async def _fetch(self, request: ScanRequest) -> list[RepositoryMetadata]:
        fetch = self._fetcher.fetch_repositories(request.account_handle, request.credential)
        if self._fetch_timeout is None:
            return await fetch
        try:
            return await asyncio.wait_for(fetch, timeout=self._fetch_timeout)
        except asyncio.TimeoutError as exc:
            raise ScanTimeoutError(
                f"Fetching repositories of {request.account_handle} took longer than "
                f"{self._fetch_timeout:g} seconds."
            ) from exc


def _average_score(result: ScanResult) -> float:
    if not result.repositories:
        return 0.0
    total = sum(repo.quality_score.total_score for repo in result.repositories)
    return total / len(result.repositories)
