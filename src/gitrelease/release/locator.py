"""
Locating the previous release.

Releases are marked with tags. Unscoped releases are tagged ``v1.2.3``
(or ``1.2.3``); releases of a submodule or subdirectory carry the scope
as prefix, e.g. ``secret_manager/v0.2.0`` or ``secret_manager-v0.2.0``.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Pattern

from gitrelease.release.models import ReleaseBoundary
from gitrelease.release.version import Version
from gitrelease.vcs.base import AccessError, RepositoryAccess


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class LocatorError(Exception):
    """Raised when the previous release cannot be determined."""

    pass


def tag_pattern(scope: Optional[str] = None) -> Pattern[str]:
    """Build the regular expression release tags must match.

    A ``v`` marks a release tag, so ``v1.2`` is a candidate and later
    reported as malformed. Without the ``v`` only a full
    ``MAJOR.MINOR.PATCH`` version matches, so build or date tags such as
    ``20261019`` are ignored.
    """
    prefix = f"{re.escape(scope)}[/-]" if scope else ""
    return re.compile(rf"{prefix}(?:v(?P<version>\d[\w.+-]*)|(?P<bare>\d+\.\d+\.\d+(?:-\w+)?))")


def tag_version(pattern: Pattern[str], tag: str) -> str:
    """Return the version part of ``tag``, or an empty string."""
    match = pattern.fullmatch(tag)
    if not match:
        return ""
    return match.group("version") or match.group("bare")


class ReleaseLocator:
    """Find the most recent release reachable from a ref."""

    def __init__(self, access: RepositoryAccess, scope: Optional[str] = None) -> None:
        self.access = access
        self.scope = scope
        self.pattern = tag_pattern(scope)

    def locate(self, ref: str = "HEAD") -> ReleaseBoundary:
        """Return the boundary of the previous release.

        Raises
        ------
        LocatorError
            If the repository cannot be queried or the newest release tag
            does not carry a valid semantic version.
        """
        try:
            found = self.access.find_latest_tag(self.pattern, ref)
        except AccessError as exc:
            raise LocatorError(f"Unable to look up release tags: {exc}") from exc

        if found is None:
            logger.info("No release tag found%s; using the whole history",
                        f" for scope '{self.scope}'" if self.scope else "")
            return ReleaseBoundary()

        tag, commit = found
        version = Version.parse(tag_version(self.pattern, tag))
        if version is None:
            raise LocatorError(f"Tag '{tag}' does not contain a valid semantic version")

        logger.info("Previous release %s at %s (tag %s)", version, commit[:7], tag)
        return ReleaseBoundary(previous_version=str(version), commit=commit, tag=tag)
