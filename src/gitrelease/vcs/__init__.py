"""
Version control system integration.

Contains the read-only repository interface used by the release logic
and the Git implementation of it.
"""

from .base import AccessError, RepositoryAccess  # noqa: F401
from .git_client import GitClient  # noqa: F401
