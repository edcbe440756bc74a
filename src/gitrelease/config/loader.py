"""
Configuration loader for gitrelease.

Settings come from the command line and, optionally, from a JSON file
named ``.gitrelease.json`` in the repository root. Values given on the
command line take precedence over the file. The file may contain:

- ``repo_url`` (str): web URL of the repository used for links
- ``subdir`` (str): restrict the release to this subdirectory
- ``submodule`` (str): restrict the release to commits with this scope
- ``banner`` (str): first line of the rendered summary
- ``skip_release_commits`` (bool): drop commits whose subject starts
  with ``Release``

If the file is malformed, contains a value of the wrong type, or the
resulting settings are contradictory, a :class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Optional

from gitrelease.release.renderer import DEFAULT_BANNER


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings in environments
# where logging is not configured. The CLI configures the root logger.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CONFIG_FILE_NAME = ".gitrelease.json"

# Characters that cannot appear in a scope used to build tag names.
_INVALID_SCOPE_CHARS = set("/*?[]\\")

_FIELD_TYPES = {
    "repo_url": str,
    "subdir": str,
    "submodule": str,
    "banner": str,
    "skip_release_commits": bool,
}


class ConfigError(Exception):
    """Raised when the configuration is missing, invalid or contradictory."""

    pass


@dataclass(frozen=True)
class ReleaseConfig:
    """Validated settings for one run."""

    repo_root: Path
    subdir: Optional[str] = None
    submodule: Optional[str] = None
    repo_url: Optional[str] = None
    banner: str = DEFAULT_BANNER
    skip_release_commits: bool = True

    @property
    def scope(self) -> Optional[str]:
        """Prefix of the release tags: the submodule, else the subdirectory."""
        return self.submodule or self.subdir


def read_config_file(repo_root: Path) -> Dict[str, Any]:
    """Read ``.gitrelease.json`` from ``repo_root``.

    Returns an empty dictionary if the file does not exist.

    Raises:
        ConfigError: If the file cannot be read, is not a JSON object, or a
            known key has a value of the wrong type.
    """
    config_path = repo_root / CONFIG_FILE_NAME
    if not config_path.exists():
        logger.debug("No configuration file at %s", config_path)
        return {}

    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.debug("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a JSON object")

    for key in sorted(set(data) - set(_FIELD_TYPES)):
        logger.debug("Ignoring unknown configuration key: %s", key)

    for key, expected in _FIELD_TYPES.items():
        if key in data and not isinstance(data[key], expected):
            raise ConfigError(f"'{key}' must be a {'boolean' if expected is bool else 'string'}")

    logger.debug("Loaded configuration from: %s", config_path)
    return {key: data[key] for key in _FIELD_TYPES if key in data}


def normalize_subdir(subdir: Optional[str]) -> Optional[str]:
    """Normalise a subdirectory given relative to the repository root.

    Raises:
        ConfigError: If the path is absolute or leaves the repository.
    """
    if subdir is None:
        return None
    text = subdir.strip().replace("\\", "/")
    if text.startswith("/"):
        raise ConfigError(f"Subdirectory must be relative to the repository root: {subdir}")
    parts = [part for part in PurePosixPath(text).parts if part not in ("", ".")]
    if ".." in parts:
        raise ConfigError(f"Subdirectory must be inside the repository: {subdir}")
    return "/".join(parts) or None


def validate_submodule(submodule: Optional[str]) -> Optional[str]:
    """Check that a release tag pattern can be built from ``submodule``.

    Raises:
        ConfigError: If the name is empty or contains whitespace, ``/`` or
            glob characters.
    """
    if submodule is None:
        return None
    name = submodule.strip()
    if not name:
        raise ConfigError("Submodule name must not be empty")
    if any(ch.isspace() or ch in _INVALID_SCOPE_CHARS for ch in name):
        raise ConfigError(f"Submodule name cannot be used in a tag pattern: {submodule!r}")
    return name


def load_config(
    repo_root: Path,
    subdir: Optional[str] = None,
    submodule: Optional[str] = None,
    repo_url: Optional[str] = None,
) -> ReleaseConfig:
    """Merge the configuration file with command line values and validate.

    Args:
        repo_root: Root of the Git repository; the configuration file is
            looked up here.
        subdir: ``--subdir`` value, overrides the file.
        submodule: ``--submodule`` value, overrides the file.
        repo_url: ``--repo-url`` value, overrides the file.

    Returns:
        The validated :class:`ReleaseConfig`.

    Raises:
        ConfigError: If the file or the merged settings are invalid.
    """
    data = read_config_file(repo_root)

    merged_subdir = subdir if subdir is not None else data.get("subdir")
    merged_submodule = submodule if submodule is not None else data.get("submodule")
    merged_url = repo_url if repo_url is not None else data.get("repo_url")
    if merged_url is not None:
        merged_url = merged_url.strip().rstrip("/") or None

    config = ReleaseConfig(
        repo_root=repo_root,
        subdir=normalize_subdir(merged_subdir),
        submodule=validate_submodule(merged_submodule),
        repo_url=merged_url,
        banner=data.get("banner", DEFAULT_BANNER),
        skip_release_commits=data.get("skip_release_commits", True),
    )
    logger.debug("Configuration: %s", config)
    return config
