"""
Configuration loader for phab_changelog.

The tool works without any configuration file. A project may place an
optional JSON file named ``.changelog_config.json`` in its repository
root to override where the changelog is written and which template
directory is used. Relative paths in the file are resolved against the
repository root; without a file the changelog is written to
``CHANGELOG.md`` in the current directory. This loader validates the structure of that file and
returns a dictionary with the defaults filled in.

If the configuration file is malformed or contains unknown keys or
values of the wrong type, a :class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings when the CLI has not
# configured logging (e.g. when the package is used as a library).
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CONFIG_FILE_NAME = ".changelog_config.json"
DEFAULT_OUTPUT_FILE = "CHANGELOG.md"

_KNOWN_KEYS = {"output_file", "template_dir"}


class ConfigError(Exception):
    """Raised when the changelog configuration is invalid."""

    pass


def load_config(repo_root: Optional[Path] = None) -> Dict[str, Any]:
    """Load the changelog configuration for ``repo_root``.

    Args:
        repo_root: Directory to look for ``.changelog_config.json`` in.
                   Defaults to the current working directory.

    Returns:
        A dictionary with the keys:
        - output_file (str): Path of the generated changelog
        - template_dir (str|None): Directory holding the four templates,
          or None to use the templates bundled with the package

    Raises:
        ConfigError: If the file exists but is malformed or invalid.
    """
    root = repo_root if repo_root is not None else Path.cwd()
    config_path = root / CONFIG_FILE_NAME
    config: Dict[str, Any] = {
        "output_file": DEFAULT_OUTPUT_FILE,
        "template_dir": None,
    }

    if not config_path.exists():
        logger.debug("No configuration file at %s, using defaults", config_path)
        return config

    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a JSON object")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        logger.error("Configuration file has unknown keys: %s", unknown)
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    if "output_file" in data:
        if not isinstance(data["output_file"], str) or not data["output_file"]:
            raise ConfigError("'output_file' must be a non-empty string")
        output_file = Path(data["output_file"])
        if not output_file.is_absolute():
            output_file = root / output_file
        config["output_file"] = str(output_file)
    if "template_dir" in data:
        if not isinstance(data["template_dir"], str):
            raise ConfigError("'template_dir' must be a string")
        template_dir = Path(data["template_dir"])
        if not template_dir.is_absolute():
            template_dir = root / template_dir
        config["template_dir"] = str(template_dir)

    logger.debug("Loaded changelog configuration from: %s", config_path)
    logger.debug("Configuration data: %s", config)
    return config
