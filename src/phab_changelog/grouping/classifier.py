"""
Per-commit transforms applied before the changelog is rendered.

Two transforms run on every parsed commit:

* :func:`extract_tag_version` reads the release version out of the ref
  decoration git prints for tagged commits and normalises the committer
  date to ``YYYY-MM-DD``.
* :func:`transform_commit` maps Conventional Commit types to section
  headings, drops commits whose type has no section, and shortens the
  fields shown in the changelog.

The module also holds the sort keys and the release boundary predicate
used by the writer.
"""

from __future__ import annotations

import logging
import re
from datetime import timezone
from typing import Any, Optional, Tuple

from dateutil import parser as date_parser

from phab_changelog.grouping.commit_model import Commit
from phab_changelog.parser.options import BREAKING_CHANGE
from phab_changelog.versioning import valid_version


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# Section heading for every commit type that appears in the changelog.
TYPE_TITLES = {
    "feat": "Features",
    "fix": "Bug Fixes",
    "perf": "Performance Improvements",
    "revert": "Reverts",
}

BREAKING_CHANGES_TITLE = "BREAKING CHANGES"
HASH_LENGTH = 7
SUBJECT_LENGTH = 80
DATE_FORMAT = "%Y-%m-%d"

_TAG_RE = re.compile(r"tag:\s*[v=]?(.+?)[,)]", re.IGNORECASE)


def extract_tag_version(commit: Commit) -> Commit:
    """Set ``version`` from the tag decoration and normalise the date.

    The tag search uses a stateless ``re.search``, so a match on one
    commit never affects the next. Missing tags or dates leave the
    commit untouched.
    """
    if isinstance(commit.git_tags, str):
        match = _TAG_RE.search(commit.git_tags)
        if match:
            commit.version = match.group(1)
            logger.debug("Commit %s tagged with version %s", commit.hash, commit.version)

    if commit.committer_date:
        commit.committer_date = format_date(commit.committer_date)
    return commit


def format_date(value: str) -> str:
    """Format a git date as ``YYYY-MM-DD`` in UTC.

    Naive timestamps are taken to be UTC already. Unparsable values are
    returned unchanged.
    """
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError) as exc:
        logger.debug("Could not parse committer date %r: %s", value, exc)
        return value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime(DATE_FORMAT)


def transform_commit(commit: Commit) -> Optional[Commit]:
    """Prepare a commit for rendering.

    Parameters
    ----------
    commit : Commit
        A parsed commit. It is modified in place.

    Returns
    -------
    Optional[Commit]
        The relabelled commit, or ``None`` if its type has no changelog
        section and it must be left out.
    """
    title = TYPE_TITLES.get(commit.type) if commit.type else None
    if title is None:
        logger.debug("Skipping commit %s with type %r", commit.hash, commit.type)
        return None
    commit.type = title

    if isinstance(commit.hash, str):
        commit.hash = commit.hash[:HASH_LENGTH]
    if isinstance(commit.subject, str):
        commit.subject = commit.subject[:SUBJECT_LENGTH]

    for note in commit.notes:
        if note.title == BREAKING_CHANGE:
            note.title = BREAKING_CHANGES_TITLE
    return commit


def is_release_commit(commit: Commit) -> bool:
    """Return True if ``commit`` starts a new release entry."""
    return valid_version(commit.version) is not None


# ----------------------------------------------------------------------
# Sort keys
# ----------------------------------------------------------------------
def _field_key(value: Any) -> Tuple[bool, Any]:
    # Missing values sort before any present value.
    return (value is not None, value if value is not None else "")


def commit_sort_key(commit: Commit) -> Tuple[Tuple[bool, Any], ...]:
    """Order commits within a section by scope, then subject."""
    return (_field_key(commit.scope), _field_key(commit.subject))


def note_sort_key(entry: Any) -> Tuple[Tuple[bool, Any], ...]:
    """Order notes in a note group by text, then the commit's scope and subject.

    ``entry`` is a note entry dictionary as built by the writer.
    """
    commit = entry.get("commit")
    return (
        _field_key(entry.get("text")),
        _field_key(getattr(commit, "scope", None)),
        _field_key(getattr(commit, "subject", None)),
    )
