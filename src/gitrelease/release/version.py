"""
Semantic versions and next-version calculation.

The bump rules follow the conventional commit convention: a breaking
change bumps the major version, a feature bumps the minor version and
everything else bumps the patch version. A release can always be cut,
so an empty commit list still results in a patch bump.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from gitrelease.release.models import Category, ParsedCommit, VersionBump


VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)(-\w+)?(-SNAPSHOT)?$")

INITIAL_VERSION = "0.0.0"


@dataclass(frozen=True)
class Version:
    """A ``major.minor.patch`` version with an optional suffix."""

    major: int
    minor: int
    patch: int
    extra: str = ""

    @classmethod
    def parse(cls, text: str) -> Optional["Version"]:
        """Parse ``text``, returning ``None`` if it is not a semantic version."""
        match = VERSION_RE.match(text.strip())
        if not match:
            return None
        extra = (match.group(4) or "") + (match.group(5) or "")
        return cls(int(match.group(1)), int(match.group(2)), int(match.group(3)), extra)

    def bump(self, bump: VersionBump) -> "Version":
        """Return the next version; any suffix is dropped."""
        if bump is VersionBump.MAJOR:
            return Version(self.major + 1, 0, 0)
        if bump is VersionBump.MINOR:
            return Version(self.major, self.minor + 1, 0)
        return Version(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}{self.extra}"


def determine_bump(commits: Iterable[ParsedCommit]) -> VersionBump:
    """Pick the version increment warranted by ``commits``."""
    commits = list(commits)
    if any(commit.breaking for commit in commits):
        return VersionBump.MAJOR
    if any(commit.category is Category.FEAT for commit in commits):
        return VersionBump.MINOR
    return VersionBump.PATCH


def next_version(previous: Optional[str], commits: Iterable[ParsedCommit]) -> str:
    """Compute the version of the upcoming release.

    Parameters
    ----------
    previous : str, optional
        Version of the previous release; ``None`` means no release exists
        yet and ``0.0.0`` is used as the starting point.
    commits : Iterable[ParsedCommit]
        Commits included in the release.

    Raises
    ------
    ValueError
        If ``previous`` is not a valid semantic version.
    """
    text = previous if previous is not None else INITIAL_VERSION
    version = Version.parse(text)
    if version is None:
        raise ValueError(f"Invalid semantic version: {text!r}")
    return str(version.bump(determine_bump(commits)))
