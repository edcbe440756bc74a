#!/usr/bin/env python
"""
Thin wrapper script to invoke the gitrelease CLI.

Running ``python run_gitrelease.py`` is equivalent to running the
``gitrelease`` console script installed via ``pyproject.toml``.
"""

from gitrelease.cli import main


if __name__ == "__main__":
    main(prog_name="gitrelease")
