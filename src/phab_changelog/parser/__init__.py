"""
Commit message parsing.

See :mod:`phab_changelog.parser.options` for the configuration and
:mod:`phab_changelog.parser.commit_parser` for the parser itself.
"""

from .commit_parser import parse_commit  # noqa: F401
from .options import BREAKING_CHANGE, ParserOptions  # noqa: F401
