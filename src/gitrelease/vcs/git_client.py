"""
Git client implementation for gitrelease.

This module wraps the read-only Git queries needed to summarise a
release: locating release tags, listing commits in a range and listing
the files changed in that range. All subprocess calls go through a
single helper so that unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import List, Optional, Pattern, Tuple

from gitrelease.release.models import RawCommit
from gitrelease.vcs.base import AccessError


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Records still propagate to the root configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# Record and field separators for ``git log`` output.
RECORD_SEP = "\x1e"
FIELD_SEP = "\x1f"

SCP_URL_RE = re.compile(r"^(?:[\w.-]+@)?(?P<host>[\w.-]+):(?P<path>[\w.-][\w./-]*?)(?:\.git)?/?$")
SSH_URL_RE = re.compile(r"^ssh://(?:[\w.-]+@)?(?P<host>[\w.-]+)(?::\d+)?/(?P<path>[\w.-][\w./-]*?)(?:\.git)?/?$")


def normalize_remote_url(url: str) -> Optional[str]:
    """Turn a remote URL into the web URL of the repository.

    ``https://`` URLs are kept; ``git@host:owner/repo.git`` and
    ``ssh://git@host/owner/repo.git`` become ``https://host/owner/repo``.
    Returns ``None`` for anything else.
    """
    url = url.strip()
    if url.startswith(("https://", "http://")):
        url = url.rstrip("/")
        if url.endswith(".git"):
            url = url[: -len(".git")]
        return url
    match = SSH_URL_RE.match(url) or SCP_URL_RE.match(url)
    if match:
        return f"https://{match.group('host')}/{match.group('path')}"
    return None


class GitClient:
    """Client for querying a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def is_repo(path: Path) -> bool:
        """Return True if the given path is the root of a Git repository."""
        return (path / ".git").exists()

    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached. ``.git`` may be a file for worktrees and
        submodules.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        AccessError
            If git cannot be started, or the command exits with a non-zero
            status when ``check`` is True.
        """
        # Report non-ASCII paths verbatim instead of C-quoted.
        full_cmd = ["git", "-c", "core.quotePath=false"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            logger.debug("Unable to run git: %s", e)
            raise AccessError(f"Unable to run git: {e}") from e

        if check and result.returncode != 0:
            logger.debug(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise AccessError(result.stderr.strip() or result.stdout.strip() or f"git {args[0]} failed")
        return result

    @staticmethod
    def _range(since: Optional[str], until: str) -> str:
        return f"{since}..{until}" if since else until

    # ------------------------------------------------------------------
    # Release queries
    # ------------------------------------------------------------------
    def find_latest_tag(self, pattern: Pattern[str], ref: str = "HEAD") -> Optional[Tuple[str, str]]:
        """Find the newest tag reachable from ``ref`` matching ``pattern``.

        Tags are ordered by creation date, newest first; tags created at
        the same moment are ordered by version-aware name.

        Returns
        -------
        Optional[Tuple[str, str]]
            ``(tag_name, commit_hash)`` or ``None`` if no tag matches.
        """
        result = self._run(
            [
                "for-each-ref",
                "--merged",
                ref,
                "--sort=-v:refname",
                "--sort=-creatordate",
                "--format=%(refname:short)%09%(objectname)%09%(*objectname)",
                "refs/tags",
            ]
        )
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            name, objectname, peeled = (line.split("\t") + ["", ""])[:3]
            if pattern.fullmatch(name):
                # Annotated tags point at a tag object; use the peeled commit.
                return name, peeled or objectname
        return None

    def list_commits(self, since: Optional[str], until: str = "HEAD") -> List[RawCommit]:
        """List the commits in ``since..until``, newest first.

        When ``since`` is ``None`` the whole history of ``until`` is listed.
        """
        result = self._run(
            [
                "log",
                "--format=%x1e%H%x1f%s%x1f%b%x1f",
                "--name-only",
                self._range(since, until),
            ]
        )
        commits = []
        for record in result.stdout.split(RECORD_SEP):
            if not record.strip():
                continue
            fields = record.split(FIELD_SEP)
            if len(fields) < 4:
                logger.debug("Ignoring malformed git log record: %r", record)
                continue
            commit_hash, subject, body, names = fields[0], fields[1], fields[2], fields[3]
            files = tuple(line.strip() for line in names.splitlines() if line.strip())
            commits.append(RawCommit(hash=commit_hash.strip(), subject=subject, body=body.strip(), files=files))
        return commits

    def list_changed_files(self, since: Optional[str], until: str = "HEAD") -> List[str]:
        """List paths changed between ``since`` and ``until``.

        Without ``since`` every path present at ``until`` is reported.
        """
        if since:
            result = self._run(["diff", "--name-only", since, until])
        else:
            result = self._run(["ls-tree", "-r", "--name-only", until])
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    # ------------------------------------------------------------------
    # Remotes
    # ------------------------------------------------------------------
    def get_remote_url(self, remote: str = "origin") -> Optional[str]:
        """Return the configured URL of ``remote`` or ``None`` if it is missing."""
        result = self._run(["remote", "get-url", remote], check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None
