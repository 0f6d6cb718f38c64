"""Tests for the SQLAlchemy scan store, on a temporary SQLite file."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from repo_scorer.domain.entities import (
    QualityScore,
    ReadmeContentScore,
    ScanResult,
    ScoredRepository,
)
from repo_scorer.infrastructure.db import create_engine, create_session_factory, init_db
from repo_scorer.infrastructure.sql_scan_store import SqlScanStore

T1 = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)
T2 = T1 + timedelta(days=1)

SCORE = QualityScore(
    repository_name=20,
    readme_exists=10,
    readme_content=ReadmeContentScore(quick_presentation=10, badges=10, usage_section=8),
    license_file=20,
)


@pytest.fixture
async def store(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'scans.db'}")
    await init_db(engine)
    yield SqlScanStore(create_session_factory(engine))
    await engine.dispose()


def _repo(name: str, scanned_at: datetime) -> ScoredRepository:
    return ScoredRepository(
        name=name,
        url=f"https://github.com/octocat/{name}",
        description=None,
        is_private=False,
        language="Go",
        stars=5,
        forks=0,
        quality_score=SCORE,
        scanned_at=scanned_at,
    )


def _result(handle: str, scanned_at: datetime, names: tuple[str, ...] = ()) -> ScanResult:
    return ScanResult(
        account_handle=handle,
        total_repositories=len(names),
        repositories=tuple(_repo(n, scanned_at) for n in names),
        scanned_at=scanned_at,
    )


class TestPersistScan:
    async def test_assigns_ids(self, store: SqlScanStore) -> None:
        stored = await store.persist_scan("user-1", _result("octocat", T1, ("a", "b")))

        assert stored.id is not None
        assert all(r.id is not None for r in stored.repositories)
        assert len({r.id for r in stored.repositories}) == 2
        assert [r.name for r in stored.repositories] == ["a", "b"]

    async def test_round_trip(self, store: SqlScanStore) -> None:
        await store.persist_scan("user-1", _result("octocat", T1, ("a",)))

        [loaded] = await store.list_scans("user-1")

        assert loaded.account_handle == "octocat"
        assert loaded.total_repositories == 1
        assert loaded.scanned_at == T1
        [repo] = loaded.repositories
        assert repo.language == "Go"
        assert repo.description is None
        assert repo.quality_score == SCORE
        assert repo.quality_score.total_score == 78


class TestListScans:
    async def test_newest_first(self, store: SqlScanStore) -> None:
        await store.persist_scan("user-1", _result("octocat", T1, ("old",)))
        await store.persist_scan("user-1", _result("octocat", T2, ("new",)))

        scans = await store.list_scans("user-1")

        assert [s.scanned_at for s in scans] == [T2, T1]
        assert scans[0].repositories[0].name == "new"

    async def test_identities_are_isolated(self, store: SqlScanStore) -> None:
        await store.persist_scan("user-1", _result("octocat", T1, ("a",)))
        await store.persist_scan("user-2", _result("torvalds", T2, ("linux",)))

        scans = await store.list_scans("user-1")

        assert [s.account_handle for s in scans] == ["octocat"]

    async def test_session_without_repositories(self, store: SqlScanStore) -> None:
        await store.persist_scan("user-1", _result("octocat", T1))

        [scan] = await store.list_scans("user-1")

        assert scan.total_repositories == 0
        assert scan.repositories == ()

    async def test_unknown_identity(self, store: SqlScanStore) -> None:
        assert await store.list_scans("nobody") == []
