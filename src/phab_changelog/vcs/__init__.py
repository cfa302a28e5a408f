"""
Version control access for phab_changelog.

Only Git is supported; see :mod:`phab_changelog.vcs.git_client`.
"""

from .git_client import GitClient, GitError  # noqa: F401
