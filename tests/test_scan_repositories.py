"""Tests for the scan-repositories use case."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from repo_scorer.domain.entities import EntryType, RepositoryMetadata, RootEntry, ScanResult
from repo_scorer.domain.exceptions import (
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    ScanTimeoutError,
)
from repo_scorer.domain.value_objects import ScanRequest
from repo_scorer.services.quality_scorer import ReadmeProfile
from repo_scorer.services.scan_repositories import ScanRepositoriesUseCase

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _repos() -> list[RepositoryMetadata]:
    return [
        RepositoryMetadata(
            name="awesome-project",
            url="https://github.com/octocat/awesome-project",
            description="Does things",
            primary_language="Python",
            star_count=10,
            fork_count=2,
            root_entries=(
                RootEntry("README.md", EntryType.FILE, "# Awesome\n" + "x" * 60),
                RootEntry("LICENSE", EntryType.FILE),
            ),
        ),
        RepositoryMetadata(name="test-repo", url="https://github.com/octocat/test-repo"),
    ]


async def _echo_store(account_identity: str, result: ScanResult) -> ScanResult:
    return replace(
        result,
        id=7,
        repositories=tuple(replace(r, id=i) for i, r in enumerate(result.repositories, start=1)),
    )


def _use_case(fetcher: AsyncMock, store: AsyncMock, **kwargs) -> ScanRepositoriesUseCase:
    return ScanRepositoriesUseCase(
        repo_fetcher=fetcher, scan_store=store, clock=lambda: NOW, **kwargs
    )


def _mocks(repos: list[RepositoryMetadata] | None = None) -> tuple[AsyncMock, AsyncMock]:
    fetcher = AsyncMock()
    fetcher.fetch_repositories = AsyncMock(return_value=_repos() if repos is None else repos)
    store = AsyncMock()
    store.persist_scan = AsyncMock(side_effect=_echo_store)
    return fetcher, store


class TestExecute:
    async def test_scores_and_persists(self) -> None:
        fetcher, store = _mocks()
        request = ScanRequest.create("octocat", "ghp_token")

        result = await _use_case(fetcher, store).execute("user-1", request)

        fetcher.fetch_repositories.assert_awaited_once_with("octocat", "ghp_token")
        store.persist_scan.assert_awaited_once()
        identity, persisted = store.persist_scan.await_args.args
        assert identity == "user-1"
        assert persisted.id is None
        assert persisted.total_repositories == 2

        assert result.id == 7
        assert result.account_handle == "octocat"
        assert result.scanned_at == NOW
        assert [r.id for r in result.repositories] == [1, 2]

        awesome, test_repo = result.repositories
        assert awesome.language == "Python"
        assert awesome.stars == 10
        assert awesome.forks == 2
        assert awesome.scanned_at == NOW
        assert awesome.quality_score.total_score == 20 + 10 + 10 + 20
        assert test_repo.quality_score.total_score == 0

    async def test_empty_account_still_persisted(self) -> None:
        fetcher, store = _mocks(repos=[])

        result = await _use_case(fetcher, store).execute("user-1", ScanRequest.create("octocat"))

        store.persist_scan.assert_awaited_once()
        assert result.total_repositories == 0
        assert result.repositories == ()

    @pytest.mark.parametrize(
        "error",
        [
            AuthenticationError("GitHub authentication failed."),
            RateLimitError("GitHub API rate limit exceeded (HTTP 403)."),
            NotFoundError("GitHub account 'ghost' was not found."),
        ],
    )
    async def test_fetch_failure_propagates_and_persists_nothing(self, error: Exception) -> None:
        fetcher, store = _mocks()
        fetcher.fetch_repositories = AsyncMock(side_effect=error)

        with pytest.raises(type(error)) as info:
            await _use_case(fetcher, store).execute("user-1", ScanRequest.create("ghost"))

        assert info.value is error
        store.persist_scan.assert_not_awaited()

    async def test_strict_profile_is_applied(self) -> None:
        fetcher, store = _mocks()

        result = await _use_case(fetcher, store, readme_profile=ReadmeProfile.STRICT).execute(
            "user-1", ScanRequest.create("octocat")
        )

        # README is 70 characters: enough for lenient, too short for strict.
        assert result.repositories[0].quality_score.readme_content.quick_presentation == 0

    async def test_timeout_cancels_fetch(self) -> None:
        cancelled = asyncio.Event()

        async def slow_fetch(handle: str, credential: str | None = None):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return []

        fetcher, store = _mocks()
        fetcher.fetch_repositories = slow_fetch

        with pytest.raises(ScanTimeoutError, match="octocat"):
            await _use_case(fetcher, store, fetch_timeout=0.01).execute(
                "user-1", ScanRequest.create("octocat")
            )

        assert cancelled.is_set()
        store.persist_scan.assert_not_awaited()


class TestHistory:
    async def test_delegates_to_store(self) -> None:
        fetcher, store = _mocks()
        past = [ScanResult("octocat", 0, (), NOW, id=1)]
        store.list_scans = AsyncMock(return_value=past)

        assert await _use_case(fetcher, store).history("user-1") == past
        store.list_scans.assert_awaited_once_with("user-1")
