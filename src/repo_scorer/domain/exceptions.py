"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any


class RepoScorerError(Exception):
    """Base exception for the entire application."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidAccountHandleError(RepoScorerError):
    """The supplied account handle is not a valid GitHub login."""


# ── GitHub API errors ───────────────────────────────────────────────────────


class RemoteFetchError(RepoScorerError):
    """Any failure while fetching repositories from GitHub. Terminal for a scan."""


class AuthenticationError(RemoteFetchError):
    """GitHub rejected the supplied credential (401)."""


class RateLimitError(RemoteFetchError):
    """GitHub API rate limit exceeded (403 / 429)."""

    def __init__(
        self,
        message: str,
        *,
        reset_at: datetime | None = None,
        retry_after: int | None = None,
    ) -> None:
        super().__init__(message)
        self.reset_at = reset_at
        self.retry_after = retry_after


class NotFoundError(RemoteFetchError):
    """The scanned account does not exist on GitHub."""


class RemoteApiError(RemoteFetchError):
    """GitHub answered 2xx but the GraphQL body reports errors."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class RemoteRequestError(RemoteFetchError):
    """GitHub answered with a non-2xx status not covered by a narrower error."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class NetworkError(RemoteFetchError):
    """Transport-level failure: connection refused, DNS, timeout."""


class ScanTimeoutError(RemoteFetchError):
    """The scan did not finish fetching within its time budget."""
