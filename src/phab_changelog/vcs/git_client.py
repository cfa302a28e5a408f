"""
Git client implementation for phab_changelog.

This module reads the raw commit history the changelog is generated
from. It only implements the read-only subset of Git needed by the
pipeline. All subprocess calls go through :meth:`GitClient._run` so that
unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Iterator, List, Optional, Sequence


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# Marks the end of one commit in the ``git log`` output.
COMMIT_SEPARATOR = "------------------------ >8 ------------------------"

# Message body followed by the metadata fields the parser understands.
LOG_FORMAT = "%B%n-hash-%n%H%n-gitTags-%n%d%n-committerDate-%n%ci"


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Read-only client for a Git repository's history."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If git is not installed, or the command exits with a non-zero
            status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            logger.error("Git executable not found: %s", e)
            raise GitError("git executable not found") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def latest_tag(self) -> Optional[str]:
        """Return the most recent tag reachable from HEAD, or None."""
        result = self._run(["describe", "--tags", "--abbrev=0"], check=False)
        if result.returncode != 0:
            logger.debug("No tag reachable from HEAD: %s", result.stderr.strip())
            return None
        return result.stdout.strip() or None

    def iter_raw_commits(
        self,
        from_ref: Optional[str] = None,
        to_ref: str = "HEAD",
        extra_args: Sequence[str] = (),
    ) -> Iterator[str]:
        """Yield the raw log entry of every commit, newest first.

        Parameters
        ----------
        from_ref : Optional[str]
            Exclusive starting point (tag, branch or hash). ``None`` reads
            the full history reachable from ``to_ref``.
        to_ref : str
            Inclusive end point.
        extra_args : Sequence[str]
            Additional options passed to ``git log``.

        Yields
        ------
        str
            The commit message followed by ``-hash-``, ``-gitTags-`` and
            ``-committerDate-`` field blocks.

        Raises
        ------
        GitError
            If the ``git log`` command fails.
        """
        revision = f"{from_ref}..{to_ref}" if from_ref else to_ref
        args = ["log", f"--format={LOG_FORMAT}%n{COMMIT_SEPARATOR}"]
        args.extend(extra_args)
        args.append(revision)
        result = self._run(args, check=True)

        count = 0
        for chunk in result.stdout.split(COMMIT_SEPARATOR):
            chunk = chunk.strip("\n")
            if not chunk.strip():
                continue
            count += 1
            yield chunk
        logger.debug("Read %d commit(s) from %s", count, revision)
