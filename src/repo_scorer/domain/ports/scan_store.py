"""Port: scan store, defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from repo_scorer.domain.entities import ScanResult


class ScanStore(Protocol):
    """Abstract contract for persisting and listing scan sessions."""

    async def persist_scan(self, account_identity: str, result: ScanResult) -> ScanResult:
        """Store a session with all of its repositories; return it with ids set."""
        ...

    async def list_scans(self, account_identity: str) -> list[ScanResult]:
        """Return every session of *account_identity*, newest first."""
        ...
