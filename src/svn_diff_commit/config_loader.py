"""
YAML configuration discovery and loading for svn_diff_commit.

Looks for config files by convention, merges them with "project wins"
semantics and interpolates ``${VAR}`` references from the environment.

Usage:
    from svn_diff_commit.config_loader import load_hierarchical_config

    raw = load_hierarchical_config()
"""

import logging
import os
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# Matches ${VAR} and ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+?)(?::-(.*?))?\}")


def interpolate_env_vars(value: str) -> str:
    """Replace ``${VAR}`` and ``${VAR:-default}`` with environment values.

    An unset or empty VAR yields *default*, or ``""`` without one.
    """

    def _replace(match: re.Match) -> str:
        env_val = os.environ.get(match.group(1))
        if env_val:
            return env_val
        return match.group(2) or ""

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _interpolate_recursive(obj: Any) -> Any:
    if isinstance(obj, str):
        return interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _interpolate_recursive(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_interpolate_recursive(item) for item in obj]
    return obj


def discover_config_files() -> list[Path]:
    """Return existing config file paths in precedence order (highest first).

    Search order:
        1. ``SVNDC_CONFIG`` env var (explicit single path)
        2. ``.svndc/config.yml`` in CWD
        3. ``.svndc/config.yaml`` in CWD
        4. ``~/.config/svndc/config.yml``
    """
    candidates: list[Path] = []

    env_path = os.environ.get("SVNDC_CONFIG")
    if env_path:
        candidates.append(Path(env_path).expanduser().resolve())

    cwd = Path.cwd()
    candidates.append(cwd / ".svndc" / "config.yml")
    candidates.append(cwd / ".svndc" / "config.yaml")
    candidates.append(Path.home() / ".config" / "svndc" / "config.yml")

    return [p for p in candidates if p.exists()]


def load_yaml_file(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def load_hierarchical_config(
    paths: Sequence[Path] | None = None,
) -> dict[str, Any]:
    """Load and merge config files.

    Args:
        paths: Files in precedence order (highest first).  Defaults to
            ``discover_config_files()``.

    Files are applied from lowest to highest precedence; each file's
    top-level keys replace those of earlier files.  Env var interpolation
    runs after the merge.  Returns ``{}`` when there is nothing to load.

    Raises:
        FileNotFoundError: An explicitly given path does not exist.
        yaml.YAMLError: A file is not valid YAML.
    """
    if paths is None:
        paths = discover_config_files()

    if not paths:
        logger.debug("No config files found, using defaults")
        return {}

    merged: dict[str, Any] = {}
    for path in reversed(paths):
        logger.debug("Loading config: %s", path)
        try:
            data = load_yaml_file(path)
        except Exception:
            logger.exception("Failed to load config file %s", path)
            raise

        if isinstance(data, dict):
            merged.update(data)
        elif data is not None:
            logger.warning(
                "Config file %s has non-dict root (%s), skipping",
                path,
                type(data).__name__,
            )

    return _interpolate_recursive(merged)
