"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from repo_scorer.domain.entities import QualityScore, ScanResult, ScoredRepository


class ScanRequestBody(BaseModel):
    """Request body for ``POST /scans``."""

    account_handle: str
    credential: str | None = Field(default=None, description="Optional GitHub personal access token")

    @field_validator("account_handle")
    @classmethod
    def _must_not_be_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            msg = "account_handle must not be empty."
            raise ValueError(msg)
        return stripped


class ReadmeContentSchema(BaseModel):
    quick_presentation: int
    badges: int
    installation_section: int
    usage_section: int
    goal_section: int
    roadmap_section: int
    licence_section: int
    total: int


class QualityScoreSchema(BaseModel):
    repository_name: int
    readme_exists: int
    readme_content: ReadmeContentSchema
    license_file: int
    total_score: int

    @classmethod
    def from_domain(cls, score: QualityScore) -> QualityScoreSchema:
        return cls.model_validate(score.to_dict())


class ScoredRepositorySchema(BaseModel):
    id: int | None
    name: str
    description: str | None
    url: str
    is_private: bool
    language: str | None
    stars: int
    forks: int
    quality_score: QualityScoreSchema
    scanned_at: datetime

    @classmethod
    def from_domain(cls, repo: ScoredRepository) -> ScoredRepositorySchema:
        return cls(
            id=repo.id,
            name=repo.name,
            description=repo.description,
            url=repo.url,
            is_private=repo.is_private,
            language=repo.language,
            stars=repo.stars,
            forks=repo.forks,
            quality_score=QualityScoreSchema.from_domain(repo.quality_score),
            scanned_at=repo.scanned_at,
        )


class ScanResultResponse(BaseModel):
    """A scan session with all of its scored repositories."""

    id: int | None
    account_handle: str
    total_repositories: int
    repositories: list[ScoredRepositorySchema]
    scanned_at: datetime

    @classmethod
    def from_domain(cls, result: ScanResult) -> ScanResultResponse:
        return cls(
            id=result.id,
            account_handle=result.account_handle,
            total_repositories=result.total_repositories,
            repositories=[ScoredRepositorySchema.from_domain(r) for r in result.repositories],
            scanned_at=result.scanned_at,
        )


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
