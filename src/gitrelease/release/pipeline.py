"""
Building a release summary from a repository.

The steps run in a single pass: locate the previous release, parse the
commits made since, collect the changed files, compute the new version
and assemble a :class:`~gitrelease.release.models.ReleaseSummary`.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional, Tuple

from gitrelease.config.loader import ReleaseConfig
from gitrelease.release.changed_files import collect_changed_files
from gitrelease.release.commit_parser import CommitParser
from gitrelease.release.locator import LocatorError, ReleaseLocator
from gitrelease.release.models import Category, ParsedCommit, ReleaseSummary
from gitrelease.release.renderer import compare_link
from gitrelease.release.version import next_version
from gitrelease.vcs.base import RepositoryAccess


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


ROOT_REF = "ROOT"


def group_commits(commits: List[ParsedCommit]) -> Dict[Category, Tuple[ParsedCommit, ...]]:
    """Group categorised commits, keeping commit order within a group.

    Commits in the ``other`` category are left out.
    """
    grouped: Dict[Category, List[ParsedCommit]] = {}
    for commit in commits:
        if commit.category is Category.OTHER:
            continue
        grouped.setdefault(commit.category, []).append(commit)
    return {category: tuple(items) for category, items in grouped.items()}


def build_summary(
    access: RepositoryAccess,
    config: ReleaseConfig,
    repo_url: str,
    today: Optional[date] = None,
    head: str = "HEAD",
) -> ReleaseSummary:
    """Assemble the release summary for ``head``.

    Raises
    ------
    LocatorError
        If the previous release cannot be determined.
    AccessError
        If listing commits or changed files fails.
    """
    boundary = ReleaseLocator(access, config.scope).locate(head)

    raw_commits = access.list_commits(boundary.commit, head)
    logger.debug("Found %d commit(s) since %s", len(raw_commits), boundary.tag or "the first commit")

    parser = CommitParser(config.submodule, config.skip_release_commits)
    commits = parser.parse_all(raw_commits)

    changed_files = collect_changed_files(access, boundary.commit, head, config.subdir)

    try:
        version = next_version(boundary.previous_version, commits)
    except ValueError as exc:
        raise LocatorError(str(exc)) from exc

    if boundary.commit:
        base = boundary.commit
    elif raw_commits:
        # Without a previous release the range starts at the root commit.
        base = raw_commits[-1].hash
    else:
        base = ROOT_REF

    return ReleaseSummary(
        new_version=version,
        date=today or date.today(),
        repo_url=repo_url,
        compare_link=compare_link(repo_url, base),
        grouped_commits=group_commits(commits),
        commits=tuple(commits),
        changed_files=tuple(changed_files),
        previous_version=boundary.previous_version,
    )
