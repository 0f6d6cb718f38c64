"""FastAPI dependency injection wiring."""

from __future__ import annotations

import httpx
from sqlalchemy.ext.asyncio import AsyncEngine

from repo_scorer.infrastructure.config import get_settings
from repo_scorer.infrastructure.db import create_engine, create_session_factory, init_db
from repo_scorer.infrastructure.github_graphql_adapter import FetcherConfig, GitHubGraphQLAdapter
from repo_scorer.infrastructure.sql_scan_store import SqlScanStore
from repo_scorer.services.quality_scorer import ReadmeProfile
from repo_scorer.services.scan_repositories import ScanRepositoriesUseCase

_http_client: httpx.AsyncClient | None = None
_engine: AsyncEngine | None = None
_scan_store: SqlScanStore | None = None


async def startup() -> None:
    """Initialise shared resources, called from the lifespan context manager."""
    global _http_client, _engine, _scan_store  # noqa: PLW0603

    settings = get_settings()
    _http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.http_timeout_seconds))
    _engine = create_engine(settings.database_url)
    await init_db(_engine)
    _scan_store = SqlScanStore(create_session_factory(_engine))


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client, _engine, _scan_store  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None
    if _engine:
        await _engine.dispose()
        _engine = None
    _scan_store = None


def get_use_case() -> ScanRepositoriesUseCase:
    """Build the use-case with injected adapters."""
    settings = get_settings()

    assert _http_client is not None, "startup() was not called"
    assert _scan_store is not None, "startup() was not called"

    token = settings.github_token.get_secret_value() if settings.github_token else None
    github_adapter = GitHubGraphQLAdapter(
        client=_http_client,
        token=token,
        config=FetcherConfig(
            endpoint=settings.github_graphql_url,
            page_size=settings.github_page_size,
            page_delay_seconds=settings.github_page_delay_seconds,
        ),
    )

    return ScanRepositoriesUseCase(
        repo_fetcher=github_adapter,
        scan_store=_scan_store,
        readme_profile=ReadmeProfile(settings.readme_profile),
        fetch_timeout=settings.scan_timeout_seconds,
    )
