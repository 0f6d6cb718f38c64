"""Domain entities: pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any

# The seven README criteria add up to 60; the README share of the score is 50.
README_CONTENT_CAP = 50


class EntryType(str, Enum):
    """Kind of a root-level tree entry."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class RootEntry:
    """A single entry of a repository's root tree."""

    name: str
    type: EntryType
    text: str | None = None  # only set for file entries fetched as text blobs

    @property
    def is_file(self) -> bool:
        return self.type is EntryType.FILE


@dataclass(frozen=True, slots=True)
class RepositoryMetadata:
    """Repository data as fetched from GitHub, input to scoring."""

    name: str
    url: str
    description: str | None = None
    is_private: bool = False
    primary_language: str | None = None
    star_count: int = 0
    fork_count: int = 0
    root_entries: tuple[RootEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class ReadmeContentScore:
    """Points earned by the README text, one field per criterion.

    The criteria maxima add up to 60 while the README content share of the
    100-point score is 50, so ``total`` is the sum of the fields capped at
    ``README_CONTENT_CAP``.  A README meeting every criterion therefore
    reports field values summing to 60 and a ``total`` of 50.
    """

    quick_presentation: int = 0
    badges: int = 0
    installation_section: int = 0
    usage_section: int = 0
    goal_section: int = 0
    roadmap_section: int = 0
    licence_section: int = 0

    @property
    def total(self) -> int:
        return min(sum(getattr(self, f.name) for f in fields(self)), README_CONTENT_CAP)


@dataclass(frozen=True, slots=True)
class QualityScore:
    """Structured quality score of one repository (max 100)."""

    repository_name: int = 0
    readme_exists: int = 0
    readme_content: ReadmeContentScore = field(default_factory=ReadmeContentScore)
    license_file: int = 0

    @property
    def total_score(self) -> int:
        return (
            self.repository_name
            + self.readme_exists
            + self.readme_content.total
            + self.license_file
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible representation, totals included."""
        data = asdict(self)
        data["readme_content"]["total"] = self.readme_content.total
        data["total_score"] = self.total_score
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QualityScore:
        """Rebuild a score from :meth:`to_dict` output. Totals are recomputed."""
        content = {
            f.name: int(data.get("readme_content", {}).get(f.name, 0))
            for f in fields(ReadmeContentScore)
        }
        return cls(
            repository_name=int(data.get("repository_name", 0)),
            readme_exists=int(data.get("readme_exists", 0)),
            readme_content=ReadmeContentScore(**content),
            license_file=int(data.get("license_file", 0)),
        )


@dataclass(frozen=True, slots=True)
class ScoredRepository:
    """A repository projection annotated with its quality score."""

    name: str
    url: str
    description: str | None
    is_private: bool
    language: str | None
    stars: int
    forks: int
    quality_score: QualityScore
    scanned_at: datetime
    id: int | None = None

    @classmethod
    def from_metadata(
        cls, repo: RepositoryMetadata, score: QualityScore, scanned_at: datetime
    ) -> ScoredRepository:
        return cls(
            name=repo.name,
            url=repo.url,
            description=repo.description,
            is_private=repo.is_private,
            language=repo.primary_language,
            stars=repo.star_count,
            forks=repo.fork_count,
            quality_score=score,
            scanned_at=scanned_at,
        )


@dataclass(frozen=True, slots=True)
class ScanResult:
    """The outcome of one scan of an account."""

    account_handle: str
    total_repositories: int
    repositories: tuple[ScoredRepository, ...]
    scanned_at: datetime
    id: int | None = None
