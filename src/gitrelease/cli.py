"""
Command line interface for the gitrelease tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``gitrelease`` command. It locates the
repository, loads the configuration, builds the release summary and
prints it as markdown on standard output. Diagnostics go to standard
error so that the output can be piped straight into a pull request or
changelog.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click

from gitrelease import __version__
from gitrelease.config.loader import ConfigError, ReleaseConfig, load_config
from gitrelease.release.locator import LocatorError
from gitrelease.release.pipeline import build_summary
from gitrelease.release.renderer import render_summary
from gitrelease.vcs.base import AccessError
from gitrelease.vcs.git_client import GitClient, normalize_remote_url

# Create a module-level logger. Records propagate to the root logger,
# which main() configures to write to stderr.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_NO_REPO = 3
EXIT_LOCATOR_ERROR = 4
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6


def print_error(message: str) -> None:
    """Print a single-line error message to standard error.

    Only the first line of ``message`` is shown; git often adds hints on
    further lines.
    """
    lines = message.strip().splitlines()
    click.echo(f"✗ {lines[0] if lines else message}", err=True)


def resolve_repo_url(config: ReleaseConfig, client: GitClient) -> str:
    """Return the web URL of the repository.

    The configured URL wins; otherwise the ``origin`` remote is used.

    Raises
    ------
    ConfigError
        If no usable URL is available.
    """
    if config.repo_url:
        return config.repo_url
    remote = client.get_remote_url("origin")
    if not remote:
        raise ConfigError("No repository URL: pass --repo-url or configure an 'origin' remote")
    url = normalize_remote_url(remote)
    if not url:
        raise ConfigError(f"Cannot derive a web URL from the 'origin' remote: {remote}")
    return url


@click.command()
@click.option(
    "--dir",
    "repo_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Repository directory (defaults to the current directory).",
)
@click.option("--subdir", default=None, help="Only list files changed below this subdirectory.")
@click.option("--submodule", default=None, help="Only include commits with this scope.")
@click.option("--repo-url", default=None, help="Web URL of the repository used for links.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="gitrelease")
def main(
    repo_dir: Optional[Path],
    subdir: Optional[str],
    submodule: Optional[str],
    repo_url: Optional[str],
    verbose: bool,
) -> None:
    """Generate a summary of the changes since the last release."""
    # Log records go to stderr; stdout only carries the summary.
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        force=True,
    )

    try:
        start = repo_dir if repo_dir is not None else Path.cwd()
        repo_root = GitClient.find_repo_root(start)
        if repo_root is None:
            print_error(f"No Git repository found at {start}")
            raise click.exceptions.Exit(EXIT_NO_REPO)
        logger.debug("Repository root: %s", repo_root)

        try:
            config = load_config(repo_root, subdir=subdir, submodule=submodule, repo_url=repo_url)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        client = GitClient(repo_root)
        try:
            url = resolve_repo_url(config, client)
            summary = build_summary(client, config, url)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
        except LocatorError as exc:
            print_error(f"Cannot locate the previous release: {exc}")
            raise click.exceptions.Exit(EXIT_LOCATOR_ERROR)
        except AccessError as exc:
            print_error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        click.echo(render_summary(summary, config.banner), nl=False)
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except Exception as exc:
        logger.debug("Unhandled error: %s", exc, exc_info=True)
        print_error(f"Unexpected error: {exc}")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)
