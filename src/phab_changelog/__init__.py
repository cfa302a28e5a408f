"""
Top-level package for phab_changelog.

This package exposes the main CLI entry point via the
``phab_changelog.cli`` module and the pipeline via
``phab_changelog.changelog``.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
