"""Typed models of the GitHub GraphQL response envelope.

GraphQL answers with nullable nested objects and union types (a tree entry's
``object`` is a Blob, a Tree or a submodule Commit).  Parsing through these
models keeps ``null`` and "not selected" apart before anything reaches the
domain layer.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from repo_scorer.domain.entities import EntryType, RepositoryMetadata, RootEntry

logger = logging.getLogger(__name__)

_ENTRY_TYPES: dict[str, EntryType] = {
    "blob": EntryType.FILE,
    "tree": EntryType.DIRECTORY,
    "commit": EntryType.DIRECTORY,  # submodule
}


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Language(_WireModel):
    name: str


class Blob(_WireModel):
    # Empty object when the entry is not a Blob (``... on Blob`` fragment).
    text: str | None = None
    is_binary: bool | None = None


class TreeEntry(_WireModel):
    name: str
    type: str
    blob: Blob | None = Field(default=None, alias="object")

    def to_domain(self) -> RootEntry | None:
        entry_type = _ENTRY_TYPES.get(self.type.lower())
        if entry_type is None:
            logger.debug("Skipping tree entry %r of unknown type %r", self.name, self.type)
            return None

        text: str | None = None
        if entry_type is EntryType.FILE and self.blob is not None and not self.blob.is_binary:
            text = self.blob.text
        return RootEntry(name=self.name, type=entry_type, text=text)


class Tree(_WireModel):
    entries: list[TreeEntry] = Field(default_factory=list)


class RepositoryNode(_WireModel):
    name: str
    url: str
    description: str | None = None
    is_private: bool = False
    primary_language: Language | None = None
    stargazer_count: int = Field(default=0, ge=0)
    fork_count: int = Field(default=0, ge=0)
    # ``null`` for an empty repository (no HEAD commit).
    tree: Tree | None = Field(default=None, alias="object")

    def to_domain(self) -> RepositoryMetadata:
        entries: list[RootEntry] = []
        if self.tree is not None:
            for raw in self.tree.entries:
                entry = raw.to_domain()
                if entry is not None:
                    entries.append(entry)

        return RepositoryMetadata(
            name=self.name,
            url=self.url,
            description=self.description,
            is_private=self.is_private,
            primary_language=self.primary_language.name if self.primary_language else None,
            star_count=self.stargazer_count,
            fork_count=self.fork_count,
            root_entries=tuple(entries),
        )


class PageInfo(_WireModel):
    has_next_page: bool = False
    end_cursor: str | None = None


class RepositoryConnection(_WireModel):
    page_info: PageInfo = Field(default_factory=PageInfo)
    nodes: list[RepositoryNode | None] = Field(default_factory=list)


class User(_WireModel):
    repositories: RepositoryConnection = Field(default_factory=RepositoryConnection)


class QueryData(_WireModel):
    user: User | None = None


class GraphQLResponse(_WireModel):
    """Top-level ``{"data": ..., "errors": [...]}`` envelope."""

    data: QueryData | None = None
    errors: list[dict[str, Any]] | None = None
