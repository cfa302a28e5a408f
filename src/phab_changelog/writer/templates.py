"""
Loading of the changelog templates.

The four templates live in the ``templates`` directory of the package
unless a project configures its own directory.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from phab_changelog.writer.options import Templates


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

TEMPLATE_FILES = {
    "main": "main.md.j2",
    "header": "header.md.j2",
    "commit": "commit.md.j2",
    "footer": "footer.md.j2",
}


class TemplateError(Exception):
    """Raised when a template cannot be loaded or rendered."""

    pass


def load_templates(template_dir: Optional[Path] = None) -> Templates:
    """Read the four templates as UTF-8 text.

    Raises
    ------
    TemplateError
        If any template file is missing or unreadable.
    """
    directory = Path(template_dir) if template_dir is not None else DEFAULT_TEMPLATE_DIR
    texts = {}
    for name, filename in TEMPLATE_FILES.items():
        path = directory / filename
        try:
            texts[name] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read template %s: %s", path, exc)
            raise TemplateError(f"Cannot read template {path}: {exc}") from exc
    logger.debug("Loaded templates from %s", directory)
    return Templates(**texts)
