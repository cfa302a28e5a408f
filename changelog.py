#!/usr/bin/env python
"""
Thin wrapper script to invoke the phab_changelog CLI.

Running ``python changelog.py`` is equivalent to running the
``phab-changelog`` console script installed via ``pyproject.toml``.
"""

from phab_changelog.cli import main


if __name__ == "__main__":
    main(prog_name="phab-changelog")
