"""
Changelog generation pipeline.

This module wires the pieces together: the raw history read by
:class:`GitClient` is parsed into commits, tagged with release versions,
classified, grouped into release entries and rendered through the
templates. :func:`generate_changelog` streams the result into the
output file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Sequence

from phab_changelog.config.loader import DEFAULT_OUTPUT_FILE, ConfigError
from phab_changelog.grouping.classifier import (
    commit_sort_key,
    extract_tag_version,
    is_release_commit,
    note_sort_key,
    transform_commit,
)
from phab_changelog.parser.commit_parser import parse_commit
from phab_changelog.parser.options import ParserOptions
from phab_changelog.vcs.git_client import GitClient
from phab_changelog.writer.changelog_writer import write_changelog
from phab_changelog.writer.options import Templates, WriterOptions
from phab_changelog.writer.templates import load_templates


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class RunOptions:
    """Which part of the history to render.

    ``from_ref`` limits the history to commits after that ref. When it is
    unset, ``all_blocks`` renders the full history; otherwise only the
    commits since the latest tag are rendered.
    """

    all_blocks: bool = True
    from_ref: Optional[str] = None


@dataclass(frozen=True)
class Context:
    """Run-wide template variables for a Diffusion repository."""

    host: str
    diffusion_id: str
    repository: bool = True
    issue: str = "T"

    def __post_init__(self) -> None:
        if not isinstance(self.host, str) or not self.host.strip():
            raise ConfigError("Phabricator host must be a non-empty string")
        if not isinstance(self.diffusion_id, str) or not self.diffusion_id.strip():
            raise ConfigError("Diffusion repository id must be a non-empty string")

    @property
    def commit(self) -> str:
        """Diffusion commit link prefix, e.g. ``rMYPROJECT``."""
        return f"r{self.diffusion_id}"

    @property
    def base_url(self) -> str:
        host = self.host.rstrip("/")
        return host if "://" in host else f"https://{host}"

    def as_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "repository": self.repository,
            "commit": self.commit,
            "issue": self.issue,
            "base_url": self.base_url,
        }


def default_writer_options(templates: Templates) -> WriterOptions:
    """Writer configuration used for Phabricator changelogs."""
    return WriterOptions(
        templates=templates,
        transform=transform_commit,
        generate_on=is_release_commit,
        commits_sort=commit_sort_key,
        notes_sort=note_sort_key,
    )


def build_changelog(
    run_options: RunOptions,
    context: Context,
    git_log_args: Sequence[str],
    parser_options: ParserOptions,
    writer_options: WriterOptions,
    client: GitClient,
) -> Iterator[str]:
    """Return an iterator over the rendered release entries.

    Nothing is read from git until the iterator is consumed.
    """
    from_ref = run_options.from_ref
    if from_ref is None and not run_options.all_blocks:
        from_ref = client.latest_tag()
        logger.debug("Rendering commits since latest tag: %s", from_ref)

    raw_commits = client.iter_raw_commits(from_ref=from_ref, extra_args=git_log_args)
    commits = (extract_tag_version(parse_commit(raw, parser_options)) for raw in raw_commits)
    return write_changelog(commits, context.as_dict(), writer_options)


def generate_changelog(
    host: str,
    diffusion_id: str,
    from_ref: Optional[str] = None,
    output: Optional[Path] = None,
    repo_root: Optional[Path] = None,
    template_dir: Optional[Path] = None,
) -> Path:
    """Generate the changelog and write it to ``output``.

    Templates are loaded before the output file is opened, so a missing
    template leaves any existing changelog untouched. Errors raised while
    streaming propagate and may leave a partially written file behind.

    Parameters
    ----------
    host : str
        Phabricator host name, e.g. ``my.phabricator.org``.
    diffusion_id : str
        Diffusion repository identifier (callsign).
    from_ref : Optional[str]
        Render only commits after this ref; ``None`` renders the full history.
    output : Optional[Path]
        Output file; defaults to ``CHANGELOG.md`` in the current directory.
    repo_root : Optional[Path]
        Repository to read; defaults to the current directory.
    template_dir : Optional[Path]
        Directory with custom templates.

    Returns
    -------
    Path
        The path of the written changelog.

    Raises
    ------
    TemplateError
        If the templates cannot be loaded or rendered.
    GitError
        If reading the history fails.
    ConfigError
        If host or repository id are empty.
    """
    templates = load_templates(template_dir)
    run_options = RunOptions(from_ref=from_ref)
    context = Context(host=host, diffusion_id=diffusion_id)
    client = GitClient(repo_root if repo_root is not None else Path.cwd())

    chunks = build_changelog(
        run_options,
        context,
        (),
        ParserOptions(),
        default_writer_options(templates),
        client,
    )

    output_path = Path(output if output is not None else DEFAULT_OUTPUT_FILE).resolve()
    entries = 0
    with open(output_path, "w", encoding="utf-8") as handle:
        for chunk in chunks:
            handle.write(chunk)
            entries += 1
    logger.debug("Wrote %d release entr%s to %s", entries, "y" if entries == 1 else "ies", output_path)
    return output_path
