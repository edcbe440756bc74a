"""
Data models for release summaries.

A run reads :class:`RawCommit` records from the repository, turns them
into :class:`ParsedCommit` records, locates the previous release as a
:class:`ReleaseBoundary` and finally assembles a :class:`ReleaseSummary`
which is handed to the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Optional, Tuple


class Category(str, Enum):
    """Release note category of a commit."""

    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    CHORE = "chore"
    OTHER = "other"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: Dict[Category, str] = {
    Category.FEAT: "Features",
    Category.FIX: "Bug Fixes",
    Category.DOCS: "Documentation",
    Category.CHORE: "Miscellaneous Chores",
    Category.OTHER: "Other Changes",
}

# Order in which category sections are rendered.
CATEGORY_ORDER: Tuple[Category, ...] = (
    Category.FEAT,
    Category.FIX,
    Category.DOCS,
    Category.CHORE,
    Category.OTHER,
)


class VersionBump(str, Enum):
    """Kind of semantic version increment."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


@dataclass(frozen=True)
class RawCommit:
    """A commit as reported by the repository.

    Attributes
    ----------
    hash : str
        Full commit hash.
    subject : str
        First line of the commit message.
    body : str
        Remainder of the commit message (may be empty).
    files : Tuple[str, ...]
        Paths touched by the commit, in the order git reports them.
    """

    hash: str
    subject: str
    body: str = ""
    files: Tuple[str, ...] = ()

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


@dataclass(frozen=True)
class ParsedCommit:
    """A commit classified according to the conventional commit format."""

    category: Category
    description: str
    source: RawCommit
    scope: Optional[str] = None
    breaking: bool = False
    pr_ref: Optional[str] = None

    @property
    def hash(self) -> str:
        return self.source.hash

    @property
    def scopes(self) -> Tuple[str, ...]:
        """Individual scope names, ``feat(api,cli)`` yields ``("api", "cli")``."""
        if not self.scope:
            return ()
        return tuple(part.strip() for part in self.scope.split(",") if part.strip())


@dataclass(frozen=True)
class ReleaseBoundary:
    """The previous release point.

    Both fields are ``None`` when the repository has no matching release
    tag; the whole history is then part of the release.
    """

    previous_version: Optional[str] = None
    commit: Optional[str] = None
    tag: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.commit is not None


@dataclass(frozen=True)
class ReleaseSummary:
    """Everything the renderer needs to produce the release notes."""

    new_version: str
    date: date
    repo_url: str
    compare_link: str
    grouped_commits: Dict[Category, Tuple[ParsedCommit, ...]] = field(default_factory=dict)
    commits: Tuple[ParsedCommit, ...] = ()
    changed_files: Tuple[str, ...] = ()
    previous_version: Optional[str] = None
