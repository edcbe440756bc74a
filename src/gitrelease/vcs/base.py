"""
Repository access interface.

The release pipeline only needs three read-only queries from the
repository. They are described by :class:`RepositoryAccess` so that the
pipeline can run against :class:`~gitrelease.vcs.git_client.GitClient`
or an in-memory stand-in.
"""

from __future__ import annotations

from typing import List, Optional, Pattern, Protocol, Tuple

from gitrelease.release.models import RawCommit


class AccessError(Exception):
    """Raised when a repository query fails."""

    pass


class RepositoryAccess(Protocol):
    """Read-only repository queries used to build a release summary."""

    def find_latest_tag(self, pattern: Pattern[str], ref: str = "HEAD") -> Optional[Tuple[str, str]]:
        """Return ``(tag, commit)`` of the newest tag reachable from ``ref``
        whose name fully matches ``pattern``, or ``None``."""
        ...

    def list_commits(self, since: Optional[str], until: str = "HEAD") -> List[RawCommit]:
        """Return commits in ``since..until``, newest first."""
        ...

    def list_changed_files(self, since: Optional[str], until: str = "HEAD") -> List[str]:
        """Return paths changed between ``since`` and ``until``."""
        ...
