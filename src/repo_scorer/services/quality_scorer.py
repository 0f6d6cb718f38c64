"""Repository quality scoring: structural signals → a score out of 100.

Four weighted criteria:

* repository name (20): not a throwaway name,
* README present (10),
* README content (50): presentation, badges and well-known sections,
* LICENSE file present (20).

Every function here is pure and deterministic; absent signals score zero.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum

from repo_scorer.domain.entities import (
    QualityScore,
    ReadmeContentScore,
    RepositoryMetadata,
    RootEntry,
)

# ── Point budgets ───────────────────────────────────────────────────────────

REPOSITORY_NAME_POINTS = 20
README_EXISTS_POINTS = 10
LICENSE_FILE_POINTS = 20

QUICK_PRESENTATION_POINTS = 10
BADGES_POINTS = 10
INSTALLATION_POINTS = 8
USAGE_POINTS = 8
GOAL_POINTS = 7
ROADMAP_POINTS = 7
LICENCE_SECTION_POINTS = 10

# ── Matching rules ──────────────────────────────────────────────────────────

THROWAWAY_NAME_WORDS: tuple[str, ...] = ("test", "boilerplate", "starter")

README_NAMES: frozenset[str] = frozenset({"readme.md", "readme"})

LICENSE_NAMES: frozenset[str] = frozenset({"license", "license.md", "licence"})
LICENSE_PREFIXES: tuple[str, ...] = ("license", "licence")

_BADGE_RE = re.compile(r"!\[[^\]]*\]\([^)]*\)|shields\.io")
_HEADING_RE = re.compile(r"^[ \t]*#+[ \t]*(?P<title>.*)$", re.MULTILINE)


class ReadmeProfile(str, Enum):
    """Threshold used for the quick-presentation criterion.

    ``LENIENT`` only asks for more than 50 characters of README text.
    ``STRICT`` asks for more than 100 characters *and* a first line longer
    than 10 characters.
    """

    LENIENT = "lenient"
    STRICT = "strict"


# ── Public API ──────────────────────────────────────────────────────────────


def score_repository(
    repo: RepositoryMetadata, *, profile: ReadmeProfile = ReadmeProfile.LENIENT
) -> QualityScore:
    """Compute the quality score of *repo*. Never raises."""
    readme = find_readme(repo.root_entries)
    readme_text = readme.text if readme is not None else None

    return QualityScore(
        repository_name=score_repository_name(repo.name),
        readme_exists=README_EXISTS_POINTS if readme_text is not None else 0,
        readme_content=analyze_readme(readme_text or "", profile=profile),
        license_file=LICENSE_FILE_POINTS if find_license_file(repo.root_entries) else 0,
    )


def score_repository_name(name: str) -> int:
    lowered = name.lower()
    if any(word in lowered for word in THROWAWAY_NAME_WORDS):
        return 0
    return REPOSITORY_NAME_POINTS


def find_readme(entries: Iterable[RootEntry]) -> RootEntry | None:
    """Return the first root file named ``README.md`` or ``README`` (any case)."""
    for entry in entries:
        if entry.is_file and entry.name.lower() in README_NAMES:
            return entry
    return None


def find_license_file(entries: Iterable[RootEntry]) -> RootEntry | None:
    """Return the first root file that looks like a license. Content is ignored."""
    for entry in entries:
        if not entry.is_file:
            continue
        name = entry.name.lower()
        if name in LICENSE_NAMES or name.startswith(LICENSE_PREFIXES):
            return entry
    return None


def analyze_readme(
    content: str, *, profile: ReadmeProfile = ReadmeProfile.LENIENT
) -> ReadmeContentScore:
    """Score README text against the seven content criteria."""
    if not content:
        return ReadmeContentScore()

    return ReadmeContentScore(
        quick_presentation=QUICK_PRESENTATION_POINTS if has_quick_presentation(content, profile) else 0,
        badges=BADGES_POINTS if has_badges(content) else 0,
        installation_section=INSTALLATION_POINTS if has_section_heading(content, "install") else 0,
        usage_section=USAGE_POINTS if has_section_heading(content, "usage") else 0,
        goal_section=GOAL_POINTS if has_section_heading(content, "goal") else 0,
        roadmap_section=ROADMAP_POINTS if has_section_heading(content, "roadmap") else 0,
        licence_section=LICENCE_SECTION_POINTS if has_section_heading(content, "licen") else 0,
    )


def has_quick_presentation(content: str, profile: ReadmeProfile = ReadmeProfile.LENIENT) -> bool:
    if profile is ReadmeProfile.STRICT:
        first_line = content.split("\n", 1)[0]
        return len(content) > 100 and len(first_line) > 10
    return len(content) > 50


def has_badges(content: str) -> bool:
    """True for a markdown image ``![alt](url)`` or any shields.io reference."""
    return _BADGE_RE.search(content) is not None


def has_section_heading(content: str, keyword: str) -> bool:
    """True when a markdown heading (``#``, ``##``, ...) mentions *keyword*.

    Matching is case-insensitive and on substrings, so ``"licen"`` finds both
    "License" and "Licence".  Body text never counts, only heading lines.
    """
    needle = keyword.lower()
    return any(needle in match["title"].lower() for match in _HEADING_RE.finditer(content))
