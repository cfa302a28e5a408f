"""
Command line interface for the phab_changelog tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``phab-changelog`` command. It validates the
arguments, locates the repository, loads the optional project
configuration and runs the changelog pipeline. Calling the command
without exactly two positional arguments, or with ``--from`` but no ref,
prints the help text and exits successfully. Unknown options are ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from phab_changelog import __version__
from phab_changelog.changelog import generate_changelog
from phab_changelog.config.loader import ConfigError, load_config
from phab_changelog.vcs.git_client import GitClient, GitError
from phab_changelog.writer.templates import TemplateError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_NO_REPO = 3
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_TEMPLATE_ERROR = 7


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("args", nargs=-1, metavar="PHABRICATOR_HOST DIFFUSION_ID")
@click.option(
    "--from",
    "from_ref",
    is_flag=False,
    flag_value="",
    metavar="<tag>",
    help="Only include commits after this tag or ref.",
)
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="phab-changelog")
@click.pass_context
def main(ctx: click.Context, args: Tuple[str, ...], from_ref: Optional[str], verbose: bool) -> None:
    """Generate CHANGELOG.md from the Conventional Commits in this repository.

    Commit and task links point at the Diffusion repository DIFFUSION_ID
    on PHABRICATOR_HOST.

    \b
    Example:
      phab-changelog my.phabricator.org MYPROJECT
      phab-changelog my.phabricator.org MYPROJECT --from v1.0.0
    """
    # ignore_unknown_options leaves unknown flags in args.
    unknown = [arg for arg in args if arg.startswith("-")]
    args = tuple(arg for arg in args if not arg.startswith("-"))

    if len(args) != 2 or from_ref == "":
        click.echo(ctx.get_help())
        raise click.exceptions.Exit(EXIT_SUCCESS)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )

    if unknown:
        logger.debug("Ignoring unknown options: %s", ", ".join(unknown))
    host, diffusion_id = args
    logger.debug("Host: %s, repository: %s, from: %s", host, diffusion_id, from_ref)

    try:
        cwd = Path.cwd()
        repo_root = GitClient.find_repo_root(cwd)
        if repo_root is None:
            print_error("Current directory is not inside a Git repository.")
            raise click.exceptions.Exit(EXIT_NO_REPO)

        try:
            config = load_config(repo_root)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        template_dir = Path(config["template_dir"]) if config["template_dir"] else None
        if from_ref:
            print_info(f"Collecting commits since {from_ref}")
        else:
            print_info("Collecting the full commit history")

        try:
            output_path = generate_changelog(
                host,
                diffusion_id,
                from_ref=from_ref,
                output=Path(config["output_file"]),
                repo_root=repo_root,
                template_dir=template_dir,
            )
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
        except TemplateError as exc:
            print_error(f"Template error: {exc}")
            raise click.exceptions.Exit(EXIT_TEMPLATE_ERROR)
        except GitError as exc:
            print_error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        print_success(f"Changelog written to {output_path}")
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
