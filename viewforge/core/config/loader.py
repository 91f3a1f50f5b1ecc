"""
Configuration loader — reads input documents and viewforge.yml.

Every pipeline input (view definitions, BUSM models, rule documents) is
either JSON or YAML. ``load_document`` reads either and returns the raw
mapping; schema checks happen in the stage that consumes it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from viewforge.core.models.settings import Settings

logger = logging.getLogger(__name__)

# Default settings filename
SETTINGS_FILE = "viewforge.yml"

_YAML_SUFFIXES = (".yml", ".yaml")


class ConfigError(Exception):
    """Raised when an input file is missing, unreadable or not a mapping."""


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for viewforge.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to viewforge.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_document(path: Path) -> dict[str, Any]:
    """Read a JSON or YAML file into a mapping.

    Raises:
        ConfigError: If the file is missing, unreadable, malformed, or
            its top level is not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"File not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    if path.suffix.lower() in _YAML_SUFFIXES:
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    else:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {path}, got {type(data).__name__}")

    logger.debug("Loaded %s (%d top-level keys)", path, len(data))
    return data


def load_settings(path: Path | None = None) -> Settings:
    """Load viewforge.yml, falling back to defaults when there is none.

    Args:
        path: Explicit path to viewforge.yml. If None, searches upward.

    Raises:
        ConfigError: If an explicit path is missing or the file is invalid.
    """
    if path is None:
        path = find_settings_file()
        if path is None:
            logger.debug("No %s found, using default settings", SETTINGS_FILE)
            return Settings()

    data = load_document(path)

    try:
        settings = Settings.model_validate(data)
    except ValueError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings from %s (output_dir=%s)", path, settings.output_dir)
    return settings


def settings_root(settings_path: Path | None) -> Path:
    """Directory relative paths in the settings resolve against."""
    return settings_path.parent.resolve() if settings_path else Path.cwd()
