"""
Configuration loading for phab_changelog.

Provides a loader for the optional ``.changelog_config.json`` file in
the repository root. See :mod:`phab_changelog.config.loader` for
implementation details.
"""

from .loader import ConfigError, load_config  # noqa: F401
