"""
Writer configuration.

:class:`WriterOptions` bundles everything the writer needs besides the
commits themselves: the per-commit transform, how commits and notes are
grouped and sorted, the predicate that starts a new release entry and
the template text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from phab_changelog.config.loader import ConfigError
from phab_changelog.grouping.commit_model import Commit


def title_sort_key(group: Dict[str, Any]) -> str:
    """Sort key for commit groups and note groups."""
    return group.get("title") or ""


@dataclass(frozen=True)
class Templates:
    """Text of the four changelog templates."""

    main: str
    header: str
    commit: str
    footer: str


@dataclass(frozen=True)
class WriterOptions:
    """Immutable writer configuration.

    Attributes
    ----------
    templates : Templates
        Template text for the main layout and its three partials.
    transform : Callable[[Commit], Optional[Commit]]
        Applied to every commit; returning ``None`` drops the commit.
    generate_on : Callable[[Commit], bool]
        Returns True for a commit that starts a new release entry.
    group_by : str
        Commit attribute whose value names the section a commit is listed in.
    commit_groups_sort, commits_sort, note_groups_sort, notes_sort : Callable
        Sort keys for sections, commits within a section, note groups
        and notes within a note group.
    """

    templates: Templates
    transform: Callable[[Commit], Optional[Commit]]
    generate_on: Callable[[Commit], bool]
    commits_sort: Callable[[Commit], Any]
    notes_sort: Callable[[Dict[str, Any]], Any]
    group_by: str = "type"
    commit_groups_sort: Callable[[Dict[str, Any]], Any] = title_sort_key
    note_groups_sort: Callable[[Dict[str, Any]], Any] = title_sort_key

    def __post_init__(self) -> None:
        if not isinstance(self.templates, Templates):
            raise ConfigError("'templates' must be a Templates instance")
        if not self.group_by or not hasattr(Commit(), self.group_by):
            raise ConfigError(f"Unknown commit attribute for grouping: {self.group_by!r}")
        for name in (
            "transform",
            "generate_on",
            "commits_sort",
            "notes_sort",
            "commit_groups_sort",
            "note_groups_sort",
        ):
            if not callable(getattr(self, name)):
                raise ConfigError(f"'{name}' must be callable")
