"""
Parser configuration for Conventional Commit messages.

:class:`ParserOptions` declares how a raw commit message is split into
structured fields. The defaults describe the Phabricator flavour used by
this tool: ``type(scope): subject`` headers, ``BREAKING CHANGE`` notes,
``T123`` task references and ``Ref`` reference actions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Pattern, Tuple

from phab_changelog.config.loader import ConfigError


HEADER_PATTERN = r"^(\w*)(?:\((.*)\))?: (.*)$"
REVERT_PATTERN = r'^Revert\s"([\s\S]*)"\s*This reverts commit (\w*)\.'
FIELD_PATTERN = r"^-(.*?)-$"
BREAKING_CHANGE = "BREAKING CHANGE"


@dataclass(frozen=True)
class ParserOptions:
    """Immutable commit parser configuration.

    Construction validates every pattern and raises :class:`ConfigError`
    when a pattern does not compile or does not provide enough capture
    groups for its correspondence.
    """

    header_pattern: str = HEADER_PATTERN
    header_correspondence: Tuple[str, ...] = ("type", "scope", "subject")
    note_keywords: Tuple[str, ...] = (BREAKING_CHANGE,)
    issue_prefixes: Tuple[str, ...] = ("T",)
    reference_actions: Tuple[str, ...] = ("Ref",)
    revert_pattern: str = REVERT_PATTERN
    revert_correspondence: Tuple[str, ...] = ("header", "hash")
    field_pattern: str = FIELD_PATTERN

    def __post_init__(self) -> None:
        header = _compile("header_pattern", self.header_pattern)
        if header.groups < len(self.header_correspondence):
            raise ConfigError(
                f"header_pattern has {header.groups} group(s) but "
                f"{len(self.header_correspondence)} correspondence name(s)"
            )
        revert = _compile("revert_pattern", self.revert_pattern)
        if revert.groups < len(self.revert_correspondence):
            raise ConfigError(
                f"revert_pattern has {revert.groups} group(s) but "
                f"{len(self.revert_correspondence)} correspondence name(s)"
            )
        _compile("field_pattern", self.field_pattern)
        for name in ("note_keywords", "issue_prefixes"):
            values = getattr(self, name)
            if not values or not all(isinstance(v, str) and v for v in values):
                raise ConfigError(f"'{name}' must be a non-empty tuple of non-empty strings")
        if not all(isinstance(v, str) and v for v in self.reference_actions):
            raise ConfigError("'reference_actions' must only contain non-empty strings")

    # ------------------------------------------------------------------
    # Compiled patterns
    # ------------------------------------------------------------------
    @property
    def header_regex(self) -> Pattern[str]:
        return re.compile(self.header_pattern)

    @property
    def revert_regex(self) -> Pattern[str]:
        return re.compile(self.revert_pattern)

    @property
    def field_regex(self) -> Pattern[str]:
        return re.compile(self.field_pattern)

    @property
    def notes_regex(self) -> Pattern[str]:
        keywords = "|".join(re.escape(k) for k in self.note_keywords)
        return re.compile(rf"^[\s|*]*({keywords})[:\s]+(.*)")

    @property
    def reference_regex(self) -> Pattern[str]:
        prefixes = "|".join(re.escape(p) for p in self.issue_prefixes)
        return re.compile(rf"(?<![\w/])({prefixes})(\d+)\b")

    @property
    def action_regex(self) -> Pattern[str]:
        if not self.reference_actions:
            # Matches nothing.
            return re.compile(r"(?!x)x")
        actions = "|".join(re.escape(a) for a in self.reference_actions)
        return re.compile(rf"^\s*({actions})\b[:\s]*(.*)$", re.IGNORECASE)


def _compile(name: str, pattern: str) -> Pattern[str]:
    try:
        return re.compile(pattern)
    except (re.error, TypeError) as exc:
        raise ConfigError(f"Invalid {name}: {exc}") from exc
