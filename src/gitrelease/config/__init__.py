"""
Configuration loading for gitrelease.

Merges command line options with the optional ``.gitrelease.json`` file
in the repository root. See :mod:`gitrelease.config.loader` for details.
"""

from .loader import ConfigError, ReleaseConfig, load_config  # noqa: F401
