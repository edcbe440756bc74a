"""
Release summary logic.

Turns the commit history since the previous release into a summary:
commit parsing (:mod:`gitrelease.release.commit_parser`), release
location (:mod:`gitrelease.release.locator`), version calculation
(:mod:`gitrelease.release.version`), changed files
(:mod:`gitrelease.release.changed_files`) and rendering
(:mod:`gitrelease.release.renderer`). :mod:`gitrelease.release.pipeline`
ties them together.
"""

from .models import (  # noqa: F401
    Category,
    ParsedCommit,
    RawCommit,
    ReleaseBoundary,
    ReleaseSummary,
    VersionBump,
)
