"""
Data models for parsed commits and release entries.

A :class:`Commit` is produced by the commit parser from one raw
``git log`` entry. It is mutated in place by the tag/date transform and
by the classifier before the writer groups commits into
:class:`ReleaseGroup` instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class Note:
    """A footer note such as ``BREAKING CHANGE: ...``."""

    title: str
    text: str


@dataclass
class Reference:
    """An issue reference found in a commit message (e.g. ``T123``)."""

    issue: str
    raw: str
    prefix: str
    action: Optional[str] = None


@dataclass
class Commit:
    """Representation of a single parsed commit.

    Attributes
    ----------
    type : Optional[str]
        The Conventional Commit type (``feat``, ``fix``...). After the
        classifier runs this holds the section heading instead.
    scope : Optional[str]
        Optional scope from ``type(scope): subject``.
    subject : Optional[str]
        Short description from the header.
    hash : Optional[str]
        Full commit hash, truncated to 7 characters by the classifier.
    committer_date : Optional[str]
        Committer date as printed by git, reformatted to ``YYYY-MM-DD``.
    git_tags : Optional[str]
        Raw ref decoration string (``%d``), e.g. ``" (HEAD -> main, tag: v1.0.0)"``.
    version : Optional[str]
        Version extracted from ``git_tags``.
    notes : List[Note]
        Footer notes in message order.
    """

    type: Optional[str] = None
    scope: Optional[str] = None
    subject: Optional[str] = None
    header: Optional[str] = None
    body: Optional[str] = None
    footer: Optional[str] = None
    hash: Optional[str] = None
    committer_date: Optional[str] = None
    git_tags: Optional[str] = None
    version: Optional[str] = None
    notes: List[Note] = field(default_factory=list)
    references: List[Reference] = field(default_factory=list)
    mentions: List[str] = field(default_factory=list)
    revert: Optional[Dict[str, Optional[str]]] = None


@dataclass
class ReleaseGroup:
    """Commits sharing one changelog entry.

    ``key_commit`` is the commit carrying the release version, or ``None``
    for the block of commits newer than the latest release.
    """

    key_commit: Optional[Commit]
    commits: List[Commit] = field(default_factory=list)

    @property
    def version(self) -> Optional[str]:
        return self.key_commit.version if self.key_commit else None

    @property
    def date(self) -> Optional[str]:
        return self.key_commit.committer_date if self.key_commit else None
