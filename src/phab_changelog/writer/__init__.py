"""
Changelog writer: grouping, sorting and template rendering.
"""

from .changelog_writer import group_releases, write_changelog  # noqa: F401
from .options import Templates, WriterOptions  # noqa: F401
from .templates import TemplateError, load_templates  # noqa: F401
