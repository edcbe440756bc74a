"""
Markdown rendering of a release summary.

The layout is meant to be pasted into a release pull request: a banner,
the new version and date, the notable changes grouped by category, the
full list of commits, the files edited and a link comparing the previous
release with ``HEAD``.
"""

from __future__ import annotations

import html
import re
from typing import List

from gitrelease.release.models import CATEGORY_ORDER, ParsedCommit, ReleaseSummary


DEFAULT_BANNER = ":robot: I have created a release \\*beep\\* \\*boop\\*"
FOOTER = "This PR was generated with [GitRelease](https://github.com/hengfengli/gitrelease)."

MARKDOWN_SPECIAL_RE = re.compile(r"([\\\[\]])")

COMMITS_HEADING = "### Commits since last release:"
FILES_HEADING = "### Files edited since last release:"


def escape_text(text: str) -> str:
    """Escape brackets and HTML in text placed inside markdown."""
    return MARKDOWN_SPECIAL_RE.sub(r"\\\1", html.escape(text, quote=False))


def commit_url(repo_url: str, commit: ParsedCommit) -> str:
    return f"{repo_url}/commit/{commit.hash}"


def commit_link(repo_url: str, commit: ParsedCommit) -> str:
    """Render ``[description (#ref)](url)`` for a commit."""
    ref = commit.pr_ref or commit.source.short_hash
    return f"[{escape_text(commit.description)} (#{ref})]({commit_url(repo_url, commit)})"


def compare_link(repo_url: str, base: str, head: str = "HEAD") -> str:
    return f"{repo_url}/compare/{base}...{head}"


def render_header(summary: ReleaseSummary, banner: str = DEFAULT_BANNER) -> List[str]:
    return [banner, "---", f"### {summary.new_version} / {summary.date.isoformat()}", ""]


def render_categories(summary: ReleaseSummary) -> List[str]:
    lines: List[str] = []
    for category in CATEGORY_ORDER:
        commits = summary.grouped_commits.get(category)
        if not commits:
            continue
        lines.append(f"#### {category.label}")
        lines.append("")
        lines.extend(f"* {escape_text(commit.description)}" for commit in commits)
        lines.append("")
    lines.append("---")
    return lines


def render_commits(summary: ReleaseSummary) -> List[str]:
    lines = [COMMITS_HEADING, ""]
    lines.extend(f"* {commit_link(summary.repo_url, commit)}" for commit in summary.commits)
    lines.append("")
    return lines


def render_files(summary: ReleaseSummary) -> List[str]:
    body = "".join(f"{html.escape(path, quote=False)}\n" for path in summary.changed_files)
    return [FILES_HEADING, "", f"<pre><code>{body}</code></pre>"]


def render_summary(summary: ReleaseSummary, banner: str = DEFAULT_BANNER) -> str:
    """Render ``summary`` as a markdown document.

    Raises
    ------
    ValueError
        If the summary has no repository URL to build links from.
    """
    if not summary.repo_url:
        raise ValueError("A repository URL is required to render links")

    lines: List[str] = []
    lines.extend(render_header(summary, banner))
    lines.extend(render_categories(summary))
    lines.extend(render_commits(summary))
    lines.extend(render_files(summary))
    lines.append(f"[Compare Changes]({summary.compare_link})")
    lines.extend(["", "", FOOTER])
    return "\n".join(lines) + "\n"
