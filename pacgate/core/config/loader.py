"""
Configuration loader: reads pacgate.yml into a Settings snapshot.

It reads YAML, validates against the pydantic Settings schema, captures
the process identity, and returns one frozen Settings object. A missing
config file is not an error; defaults apply.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from pacgate.core.models.settings import EnvSnapshot, Settings

logger = logging.getLogger(__name__)

CONFIG_FILE = "pacgate.yml"
ENV_CONFIG = "PACGATE_CONFIG"

_SECTIONS = ("language", "build", "pacman", "aur", "repositories")


class ConfigError(Exception):
    """Raised when configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Locate pacgate.yml.

    Order: ``$PACGATE_CONFIG``, then upward from ``start_dir`` (default:
    cwd), then ``$XDG_CONFIG_HOME/pacgate/pacgate.yml``.

    Returns:
        Path to the config file, or None if there is none.
    """
    explicit = os.environ.get(ENV_CONFIG)
    if explicit:
        return Path(explicit)

    current = (start_dir or Path.cwd()).resolve()
    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    xdg = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    candidate = Path(xdg) / "pacgate" / CONFIG_FILE
    if candidate.is_file():
        return candidate
    return None


def load_settings(path: Path | None = None, env: EnvSnapshot | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Explicit config path. If None, searches with ``find_config_file``.
        env: Identity snapshot; captured from the running process if None.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    env = env or EnvSnapshot.capture()
    explicit = path is not None
    if path is None:
        path = find_config_file()

    if path is None:
        logger.debug("No %s found, using defaults", CONFIG_FILE)
        return Settings(env=env)

    if not path.is_file():
        if explicit or os.environ.get(ENV_CONFIG):
            raise ConfigError(f"Config file not found: {path}")
        return Settings(env=env)

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    unknown = set(data) - set(_SECTIONS)
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(sorted(unknown)))

    try:
        settings = Settings.model_validate({**{k: data[k] for k in _SECTIONS if k in data}, "env": env})
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.info("Loaded settings from %s", path)
    return settings
