"""
Conventional commit parsing.

Subjects are matched against ``type(scope)!: description``. The match
is deliberately forgiving: anything that does not follow the format is
still returned as a :class:`ParsedCommit` in the ``other`` category so
that parsing can never fail.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from gitrelease.release.models import Category, ParsedCommit, RawCommit


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


SUBJECT_RE = re.compile(
    r"^(?P<type>[A-Za-z]+)(?:\((?P<scope>[^()]*)\))?(?P<bang>!)?:\s+(?P<description>.+)$"
)
BREAKING_FOOTER_RE = re.compile(r"^BREAKING[ -]CHANGE\b", re.MULTILINE)
PR_REF_RE = re.compile(r"\s*\(#(?P<number>\d+)\)\s*$")

TYPE_CATEGORIES = {
    "feat": Category.FEAT,
    "fix": Category.FIX,
    "docs": Category.DOCS,
    "chore": Category.CHORE,
    "build": Category.CHORE,
    "ci": Category.CHORE,
    "refactor": Category.CHORE,
    "test": Category.CHORE,
}


def parse_commit(raw: RawCommit) -> ParsedCommit:
    """Classify a single commit.

    Parameters
    ----------
    raw : RawCommit
        The commit as read from the repository.

    Returns
    -------
    ParsedCommit
        Always returned; unrecognised subjects fall into
        :attr:`Category.OTHER` with the whole subject as description.
    """
    subject = raw.subject.strip()
    pr_ref: Optional[str] = None
    pr_match = PR_REF_RE.search(subject)
    if pr_match:
        pr_ref = pr_match.group("number")
        subject = subject[: pr_match.start()].rstrip()

    breaking_footer = bool(BREAKING_FOOTER_RE.search(raw.body))

    match = SUBJECT_RE.match(subject)
    if not match:
        return ParsedCommit(
            category=Category.OTHER,
            description=subject,
            source=raw,
            breaking=breaking_footer,
            pr_ref=pr_ref,
        )

    commit_type = match.group("type").lower()
    scope = (match.group("scope") or "").strip() or None
    return ParsedCommit(
        category=TYPE_CATEGORIES.get(commit_type, Category.OTHER),
        description=match.group("description").strip(),
        source=raw,
        scope=scope,
        breaking=bool(match.group("bang")) or breaking_footer,
        pr_ref=pr_ref,
    )


class CommitParser:
    """Parse and filter the commits belonging to a release.

    Parameters
    ----------
    submodule : str, optional
        When given, only commits whose scope names this submodule are kept.
    skip_release_commits : bool
        Drop release bookkeeping commits (subjects starting with
        ``Release``).
    """

    def __init__(self, submodule: Optional[str] = None, skip_release_commits: bool = True) -> None:
        self.submodule = submodule
        self.skip_release_commits = skip_release_commits

    def is_included(self, commit: ParsedCommit) -> bool:
        if self.skip_release_commits and commit.source.subject.startswith("Release"):
            return False
        if self.submodule:
            return self.submodule in commit.scopes
        return True

    def parse_all(self, commits: Iterable[RawCommit]) -> List[ParsedCommit]:
        """Parse ``commits`` keeping their order and dropping excluded ones."""
        parsed: List[ParsedCommit] = []
        seen = set()
        for raw in commits:
            if raw.hash in seen:
                logger.debug("Skipping duplicate commit %s", raw.hash)
                continue
            seen.add(raw.hash)
            commit = parse_commit(raw)
            if self.is_included(commit):
                parsed.append(commit)
            else:
                logger.debug("Excluding commit %s: %s", raw.short_hash, raw.subject)
        return parsed
