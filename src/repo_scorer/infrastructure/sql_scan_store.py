"""SQLAlchemy-backed scan store: implements the ScanStore port."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from repo_scorer.domain.entities import QualityScore, ScanResult, ScoredRepository
from repo_scorer.infrastructure.sqlmodels import ScannedRepositoryRow, ScanSessionRow

logger = logging.getLogger(__name__)


class SqlScanStore:
    """Persists scan sessions and their repositories in one transaction."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def persist_scan(self, account_identity: str, result: ScanResult) -> ScanResult:
        session_row = ScanSessionRow(
            account_identity=account_identity,
            account_handle=result.account_handle,
            total_repositories=result.total_repositories,
            scanned_at=result.scanned_at,
        )
        repo_rows = [_to_row(repo) for repo in result.repositories]
        session_row.repositories = repo_rows

        async with self._session_factory() as session:
            async with session.begin():
                session.add(session_row)
                await session.flush()

        logger.info(
            "Stored scan %d of %s with %d repositories",
            session_row.id,
            result.account_handle,
            len(repo_rows),
        )
        return replace(
            result,
            id=session_row.id,
            repositories=tuple(
                replace(repo, id=row.id) for repo, row in zip(result.repositories, repo_rows)
            ),
        )

    async def list_scans(self, account_identity: str) -> list[ScanResult]:
        async with self._session_factory() as session:
            rows = await session.scalars(
                select(ScanSessionRow)
                .where(ScanSessionRow.account_identity == account_identity)
                .options(selectinload(ScanSessionRow.repositories))
                .order_by(ScanSessionRow.scanned_at.desc(), ScanSessionRow.id.desc())
            )
            return [_to_result(row) for row in rows]


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_row(repo: ScoredRepository) -> ScannedRepositoryRow:
    return ScannedRepositoryRow(
        name=repo.name,
        description=repo.description,
        url=repo.url,
        is_private=repo.is_private,
        language=repo.language,
        stars=repo.stars,
        forks=repo.forks,
        quality_score=repo.quality_score.to_dict(),
        scanned_at=repo.scanned_at,
    )


def _to_result(row: ScanSessionRow) -> ScanResult:
    return ScanResult(
        id=row.id,
        account_handle=row.account_handle,
        total_repositories=row.total_repositories,
        scanned_at=_as_utc(row.scanned_at),
        repositories=tuple(
            ScoredRepository(
                id=repo.id,
                name=repo.name,
                url=repo.url,
                description=repo.description,
                is_private=repo.is_private,
                language=repo.language,
                stars=repo.stars,
                forks=repo.forks,
                quality_score=QualityScore.from_dict(repo.quality_score),
                scanned_at=_as_utc(repo.scanned_at),
            )
            for repo in row.repositories
        ),
    )
