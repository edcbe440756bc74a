"""Collecting the files changed since the previous release."""

from __future__ import annotations

from typing import Iterable, List, Optional

from gitrelease.vcs.base import RepositoryAccess


def filter_paths(paths: Iterable[str], subdir: Optional[str] = None) -> List[str]:
    """Deduplicate and sort ``paths``.

    With ``subdir`` only paths below it are kept, relative to it.
    """
    if subdir:
        prefix = subdir.rstrip("/") + "/"
        paths = (path[len(prefix):] for path in paths if path.startswith(prefix))
    return sorted({path for path in paths if path})


def collect_changed_files(
    access: RepositoryAccess,
    since: Optional[str],
    until: str = "HEAD",
    subdir: Optional[str] = None,
) -> List[str]:
    """Return the sorted, deduplicated paths changed in ``since..until``."""
    return filter_paths(access.list_changed_files(since, until), subdir)
