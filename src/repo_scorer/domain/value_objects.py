"""Value objects: self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass

from repo_scorer.domain.exceptions import InvalidAccountHandleError

# GitHub logins: 1-39 alphanumerics, single hyphens, no leading/trailing hyphen.
_GITHUB_LOGIN_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38}$")


@dataclass(frozen=True, slots=True)
class ScanRequest:
    """Validated request to scan one GitHub account.

    The *credential* is an optional personal access token; when absent the
    scan runs with whatever default credential the fetcher was built with.
    """

    account_handle: str
    credential: str | None = None

    @classmethod
    def create(cls, account_handle: str, credential: str | None = None) -> ScanRequest:
        """Parse and validate a raw handle / token pair."""
        handle = account_handle.strip()
        if not _GITHUB_LOGIN_RE.match(handle):
            raise InvalidAccountHandleError(
                f"Invalid GitHub account handle: '{handle}'. "
                "Expected 1-39 letters, digits or single hyphens."
            )
        token = credential.strip() if credential else None
        return cls(account_handle=handle, credential=token or None)
