"""GitHub GraphQL API adapter: implements the RepositoryFetcher port."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httpx

from repo_scorer.domain.entities import RepositoryMetadata
from repo_scorer.domain.exceptions import (
    AuthenticationError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    RemoteApiError,
    RemoteRequestError,
)
from repo_scorer.infrastructure.github_graphql_models import (
    GraphQLResponse,
    RepositoryConnection,
)

logger = logging.getLogger(__name__)

_GITHUB_GRAPHQL = "https://api.github.com/graphql"

# ``HEAD:`` resolves to the root tree of the default branch.
_REPOSITORIES_QUERY = """\
query($accountHandle: String!, $cursor: String) {
  user(login: $accountHandle) {
    repositories(first: %(page_size)d, after: $cursor, ownerAffiliations: OWNER) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        name
        description
        url
        isPrivate
        primaryLanguage {
          name
        }
        stargazerCount
        forkCount
        object(expression: "HEAD:") {
          ... on Tree {
            entries {
              name
              type
              object {
                ... on Blob {
                  text
                  isBinary
                }
              }
            }
          }
        }
      }
    }
  }
}
"""


@dataclass(frozen=True, slots=True)
class FetcherConfig:
    """Endpoint and paging settings for :class:`GitHubGraphQLAdapter`."""

    endpoint: str = _GITHUB_GRAPHQL
    page_size: int = 100
    page_delay_seconds: float = 0.1
    user_agent: str = "repo-scorer/1.0"

    def __post_init__(self) -> None:
        if not 1 <= self.page_size <= 100:
            msg = f"page_size must be between 1 and 100, got {self.page_size}"
            raise ValueError(msg)


class GitHubGraphQLAdapter:
    """Concrete RepositoryFetcher backed by the GitHub v4 GraphQL API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str | None = None,
        config: FetcherConfig | None = None,
    ) -> None:
        self._client = client
        self._default_token = token
        self._config = config or FetcherConfig()
        self._query = _REPOSITORIES_QUERY % {"page_size": self._config.page_size}

    async def fetch_repositories(
        self, account_handle: str, credential: str | None = None
    ) -> list[RepositoryMetadata]:
        """Walk every page of the account's repositories, one request at a time."""
        token = credential or self._default_token
        repositories: list[RepositoryMetadata] = []
        cursor: str | None = None
        pages = 0

        while True:
            connection = await self._fetch_page(account_handle, cursor, token)
            pages += 1
            repositories.extend(node.to_domain() for node in connection.nodes if node is not None)
            logger.debug(
                "Page %d for %s: %d repositories (has_next=%s)",
                pages,
                account_handle,
                len(connection.nodes),
                connection.page_info.has_next_page,
            )

            if not connection.page_info.has_next_page:
                break
            if not connection.page_info.end_cursor:
                logger.warning(
                    "GitHub reported another page for %s without a cursor; stopping", account_handle
                )
                break

            cursor = connection.page_info.end_cursor
            await asyncio.sleep(self._config.page_delay_seconds)

        logger.info(
            "Fetched %d repositories for %s in %d page(s)", len(repositories), account_handle, pages
        )
        return repositories

    async def _fetch_page(
        self, account_handle: str, cursor: str | None, token: str | None
    ) -> RepositoryConnection:
        """Run one page query and unwrap ``data.user.repositories``."""
        resp = await self._post(
            {"query": self._query, "variables": {"accountHandle": account_handle, "cursor": cursor}},
            token,
        )
        try:
            envelope = GraphQLResponse.model_validate(resp.json())
        except ValueError as exc:
            raise RemoteApiError(f"Unexpected GitHub API response: {exc}") from exc

        if envelope.errors:
            # GraphQL reports an exhausted primary rate limit as 200 + RATE_LIMITED.
            if resp.headers.get("x-ratelimit-remaining") == "0" or any(
                err.get("type") == "RATE_LIMITED" for err in envelope.errors
            ):
                raise _rate_limit_error(resp, "GraphQL")
            if any(err.get("type") == "NOT_FOUND" for err in envelope.errors):
                raise NotFoundError(f"GitHub account '{account_handle}' was not found.")
            messages = [str(err.get("message", err)) for err in envelope.errors]
            raise RemoteApiError(f"GitHub API errors: {messages}", envelope.errors)

        if envelope.data is None or envelope.data.user is None:
            raise NotFoundError(f"GitHub account '{account_handle}' was not found.")

        return envelope.data.user.repositories

    async def _post(self, payload: dict[str, Any], token: str | None) -> httpx.Response:
        """POST a GraphQL document with transport-level error translation."""
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self._config.user_agent,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            resp = await self._client.post(self._config.endpoint, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise NetworkError(
                f"Network error contacting GitHub: {str(exc) or type(exc).__name__}"
            ) from exc

        if resp.status_code == 401:
            raise AuthenticationError(
                "GitHub authentication failed. Check the personal access token."
            )

        if resp.status_code in (403, 429):
            raise _rate_limit_error(resp, f"HTTP {resp.status_code}")

        if not resp.is_success:
            raise RemoteRequestError(
                f"GitHub API request failed with HTTP {resp.status_code}", resp.status_code
            )

        return resp


def _rate_limit_error(resp: httpx.Response, source: str) -> RateLimitError:
    reset_at = _parse_reset(resp.headers.get("x-ratelimit-reset"))
    retry_after = _parse_int(resp.headers.get("retry-after"))
    hint = ""
    if reset_at is not None:
        hint = f" Resets at {reset_at:%Y-%m-%d %H:%M:%S} UTC."
    elif retry_after is not None:
        hint = f" Retry after {retry_after} seconds."
    return RateLimitError(
        f"GitHub API rate limit exceeded ({source}).{hint}",
        reset_at=reset_at,
        retry_after=retry_after,
    )


def _parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _parse_reset(raw: str | None) -> datetime | None:
    """``x-ratelimit-reset`` is epoch seconds."""
    epoch = _parse_int(raw)
    if epoch is None:
        return None
    try:
        return datetime.fromtimestamp(epoch, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
