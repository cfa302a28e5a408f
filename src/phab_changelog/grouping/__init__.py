"""
Commit models and classification.

See :mod:`phab_changelog.grouping.commit_model` for the data types and
:mod:`phab_changelog.grouping.classifier` for the transforms applied
before rendering.
"""

from .commit_model import Commit, Note, Reference, ReleaseGroup  # noqa: F401
from .classifier import extract_tag_version, is_release_commit, transform_commit  # noqa: F401
