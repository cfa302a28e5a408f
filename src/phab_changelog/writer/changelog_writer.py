"""
Render commits into changelog text.

Commits arrive newest first. :func:`group_releases` splits the stream
into release entries at every commit the ``generate_on`` predicate
accepts, and :func:`write_changelog` renders each entry through the
Jinja2 templates as soon as it is complete, so the caller can write the
changelog without holding all of it in memory.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Any, Dict, Iterable, Iterator, List, Mapping

import jinja2

from phab_changelog.grouping.commit_model import Commit, ReleaseGroup
from phab_changelog.versioning import is_patch_version
from phab_changelog.writer.options import Templates, WriterOptions
from phab_changelog.writer.templates import TemplateError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


UNRELEASED_VERSION = "Unreleased"


def build_environment(templates: Templates) -> jinja2.Environment:
    """Create the Jinja2 environment with the partials registered by name.

    The main template includes the others as ``"header"``, ``"commit"``
    and ``"footer"``.
    """
    loader = jinja2.DictLoader(
        {
            "main": templates.main,
            "header": templates.header,
            "commit": templates.commit,
            "footer": templates.footer,
        }
    )
    return jinja2.Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def group_releases(commits: Iterable[Commit], options: WriterOptions) -> Iterator[ReleaseGroup]:
    """Transform commits and split them into release entries.

    The commit deciding a boundary is the transformed commit, or the raw
    commit when the transform dropped it, so a release tag on a commit
    that is not listed still opens its entry. The leading entry without
    a release commit is only produced if it holds at least one commit.
    """
    current = ReleaseGroup(key_commit=None)
    for raw in commits:
        commit = options.transform(raw)
        key_commit = commit if commit is not None else raw
        if options.generate_on(key_commit):
            if current.key_commit is not None or current.commits:
                yield current
            current = ReleaseGroup(key_commit=key_commit)
        if commit is not None:
            current.commits.append(commit)
    if current.key_commit is not None or current.commits:
        yield current


def _commit_groups(commits: List[Commit], options: WriterOptions) -> List[Dict[str, Any]]:
    grouped: "OrderedDict[Any, List[Commit]]" = OrderedDict()
    for commit in commits:
        grouped.setdefault(getattr(commit, options.group_by), []).append(commit)
    groups = [
        {"title": title, "commits": sorted(items, key=options.commits_sort)}
        for title, items in grouped.items()
    ]
    return sorted(groups, key=options.commit_groups_sort)


def _note_groups(commits: List[Commit], options: WriterOptions) -> List[Dict[str, Any]]:
    grouped: "OrderedDict[str, List[Dict[str, Any]]]" = OrderedDict()
    for commit in commits:
        for note in commit.notes:
            grouped.setdefault(note.title, []).append(
                {"title": note.title, "text": note.text, "commit": commit}
            )
    groups = [
        {"title": title, "notes": sorted(notes, key=options.notes_sort)}
        for title, notes in grouped.items()
    ]
    return sorted(groups, key=options.note_groups_sort)


def release_context(group: ReleaseGroup, options: WriterOptions) -> Dict[str, Any]:
    """Template variables describing one release entry."""
    version = group.version or UNRELEASED_VERSION
    return {
        "version": version,
        "date": group.date,
        "is_patch": is_patch_version(group.version),
        "commit_groups": _commit_groups(group.commits, options),
        "note_groups": _note_groups(group.commits, options),
    }


def write_changelog(
    commits: Iterable[Commit],
    context: Mapping[str, Any],
    options: WriterOptions,
) -> Iterator[str]:
    """Yield the rendered text of each release entry, newest first.

    Parameters
    ----------
    commits : Iterable[Commit]
        Parsed commits, newest first.
    context : Mapping[str, Any]
        Run-wide template variables, available to templates as ``root``.
    options : WriterOptions
        Writer configuration.

    Raises
    ------
    TemplateError
        If a template has a syntax error or fails to render.
    """
    env = build_environment(options.templates)
    try:
        template = env.get_template("main")
    except jinja2.TemplateError as exc:
        raise TemplateError(f"Invalid changelog template: {exc}") from exc

    root = dict(context)
    for group in group_releases(commits, options):
        variables = release_context(group, options)
        logger.debug(
            "Rendering release %s with %d commit(s)", variables["version"], len(group.commits)
        )
        try:
            yield template.render({**root, **variables, "root": root})
        except jinja2.TemplateError as exc:
            raise TemplateError(f"Failed to render release {variables['version']}: {exc}") from exc
