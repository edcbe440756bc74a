"""
Top-level package for gitrelease.

gitrelease summarises the commits made since the last tagged release of
a Git repository as markdown. The CLI entry point lives in
``gitrelease.cli``.
"""

__all__ = ["__version__"]

__version__ = "0.2.0"
