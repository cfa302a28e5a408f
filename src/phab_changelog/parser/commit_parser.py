"""
Parse raw ``git log`` entries into :class:`Commit` objects.

A raw entry is the commit message followed by metadata blocks, each
introduced by a field marker line such as ``-hash-``. The message
header is matched against the configured header pattern; the remaining
lines are split into body and footer. The footer starts at the first
note (``BREAKING CHANGE: ...``) or reference action line (``Ref T12``).
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Pattern, Tuple

from phab_changelog.grouping.commit_model import Commit, Note, Reference
from phab_changelog.parser.options import ParserOptions


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# Field markers emitted by the git log format, mapped to Commit attributes.
FIELD_ATTRIBUTES = {
    "hash": "hash",
    "gitTags": "git_tags",
    "committerDate": "committer_date",
}

_MENTION_RE = re.compile(r"(?<![\w.])@([\w-]+)")


def _split_fields(raw: str, options: ParserOptions) -> Tuple[List[str], Dict[str, Optional[str]]]:
    """Separate message lines from the trailing metadata field blocks."""
    field_re = options.field_regex
    message: List[str] = []
    fields: Dict[str, List[str]] = {}
    current: Optional[str] = None
    for line in raw.splitlines():
        match = field_re.match(line)
        if match:
            current = match.group(1)
            fields.setdefault(current, [])
            continue
        if current is None:
            message.append(line)
        else:
            fields[current].append(line)

    values: Dict[str, Optional[str]] = {}
    for name, lines in fields.items():
        value = "\n".join(lines).strip()
        values[name] = value or None
    return message, values


def _join(lines: List[str]) -> Optional[str]:
    text = "\n".join(lines).strip()
    return text or None


def parse_commit(raw: str, options: Optional[ParserOptions] = None) -> Commit:
    """Parse one raw log entry.

    A header that does not match the header pattern is not an error: the
    commit is returned with ``type`` unset and is dropped later by the
    classifier.

    Parameters
    ----------
    raw : str
        Message text plus ``-field-`` blocks as produced by
        :meth:`GitClient.iter_raw_commits`.
    options : Optional[ParserOptions]
        Parser configuration; defaults to :class:`ParserOptions`.

    Returns
    -------
    Commit
        The parsed commit.
    """
    options = options or ParserOptions()
    lines, fields = _split_fields(raw, options)

    commit = Commit()
    for name, value in fields.items():
        attr = FIELD_ATTRIBUTES.get(name)
        if attr is None:
            logger.debug("Ignoring unknown commit field: %s", name)
            continue
        setattr(commit, attr, value)

    # Trim blank lines around the message.
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        logger.debug("Commit %s has an empty message", commit.hash)
        return commit

    header = lines[0].strip()
    commit.header = header
    match = options.header_regex.match(header)
    if match:
        for name, value in zip(options.header_correspondence, match.groups()):
            setattr(commit, name, value)
    else:
        logger.debug("Header does not match pattern: %r", header)

    revert_match = options.revert_regex.match("\n".join(lines))
    if revert_match:
        commit.revert = dict(zip(options.revert_correspondence, revert_match.groups()))

    notes_re = options.notes_regex
    action_re = options.action_regex
    reference_re = options.reference_regex

    body: List[str] = []
    footer: List[str] = []
    in_footer = False
    current_note: Optional[Note] = None

    _collect_references(commit, header, None, reference_re)
    for line in lines[1:]:
        note_match = notes_re.match(line)
        if note_match:
            in_footer = True
            current_note = Note(title=note_match.group(1), text=note_match.group(2).strip())
            commit.notes.append(current_note)
            footer.append(line)
            continue

        action_match = action_re.match(line)
        if action_match:
            in_footer = True
            current_note = None
            _collect_references(commit, action_match.group(2), action_match.group(1), reference_re)
            footer.append(line)
            continue

        _collect_references(commit, line, None, reference_re)
        commit.mentions.extend(_MENTION_RE.findall(line))

        if current_note is not None:
            current_note.text = f"{current_note.text}\n{line}" if current_note.text else line
            footer.append(line)
        elif in_footer:
            footer.append(line)
        else:
            body.append(line)

    for note in commit.notes:
        note.text = note.text.strip()
    commit.body = _join(body)
    commit.footer = _join(footer)
    return commit


def _collect_references(
    commit: Commit,
    text: str,
    action: Optional[str],
    reference_re: Pattern[str],
) -> None:
    for match in reference_re.finditer(text):
        commit.references.append(
            Reference(
                issue=match.group(2),
                raw=match.group(0),
                prefix=match.group(1),
                action=action,
            )
        )
