"""
Configuration loader for git_wizard.

The wizards work without any configuration. Two optional JSON files can
adjust their defaults:

* ``~/.git_wizard/config.json`` - user-level settings
* ``<repo root>/.git-wizard.json`` - repository settings, applied on top

Both files are validated; a malformed file raises :class:`ConfigError`
rather than being silently ignored.
"""

from __future__ import annotations

import copy
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings in environments
# where the CLI has not configured logging yet.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CONFIG_FILENAME = "config.json"
REPO_CONFIG_FILENAME = ".git-wizard.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    "default_remote": "origin",
    "common_scopes": ["api", "ui", "auth", "core", "data", "deps", "config"],
    "spinner_interval": 0.08,
    "max_preview_commits": 5,
    "body_max_line_length": 100,
    "verbose": False,
}

_KEBAB_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class ConfigError(Exception):
    """Raised when a configuration file is malformed or invalid."""

    pass


def _get_config_directory() -> Path:
    """Return the user-level configuration directory, ``~/.git_wizard``."""
    return Path.home() / ".git_wizard"


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return data


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config(data: Dict[str, Any], source: str = "configuration") -> None:
    """Validate the known keys of ``data``.

    Unknown keys are ignored with a debug message so that newer
    configuration files keep working with older releases.

    Raises
    ------
    ConfigError
        If a known key has the wrong type or an invalid value.
    """
    for key in data:
        if key not in DEFAULT_CONFIG:
            logger.debug("Ignoring unknown configuration key '%s' in %s", key, source)

    if "default_remote" in data:
        remote = data["default_remote"]
        if not isinstance(remote, str) or not remote.strip():
            raise ConfigError("'default_remote' must be a non-empty string")
    if "common_scopes" in data:
        scopes = data["common_scopes"]
        if not isinstance(scopes, list) or not all(isinstance(s, str) for s in scopes):
            raise ConfigError("'common_scopes' must be a list of strings")
        bad = [s for s in scopes if not _KEBAB_RE.match(s)]
        if bad:
            raise ConfigError(
                f"'common_scopes' entries must be kebab-case: {', '.join(bad)}"
            )
    if "spinner_interval" in data:
        interval = data["spinner_interval"]
        if not _is_number(interval) or interval <= 0:
            raise ConfigError("'spinner_interval' must be a positive number")
    for key in ("max_preview_commits", "body_max_line_length"):
        if key in data:
            value = data[key]
            if not _is_int(value) or value < 1:
                raise ConfigError(f"'{key}' must be a positive integer")
    if "verbose" in data and not isinstance(data["verbose"], bool):
        raise ConfigError("'verbose' must be a boolean")


def load_config(repo_root: Optional[Path] = None) -> Dict[str, Any]:
    """Load and merge the user and repository configuration.

    Args:
        repo_root: Root of the current repository. When given, its
            ``.git-wizard.json`` overrides the user-level settings.

    Returns:
        A dictionary holding every key of :data:`DEFAULT_CONFIG`.

    Raises:
        ConfigError: If either file exists but is malformed or invalid.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    candidates = [_get_config_directory() / CONFIG_FILENAME]
    if repo_root is not None:
        candidates.append(repo_root / REPO_CONFIG_FILENAME)

    for path in candidates:
        if not path.exists():
            continue
        data = _read_json(path)
        validate_config(data, source=str(path))
        config.update({k: v for k, v in data.items() if k in DEFAULT_CONFIG})
        logger.debug("Loaded configuration from: %s", path)

    logger.debug("Configuration data: %s", config)
    return config
