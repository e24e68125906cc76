"""Utilities for resolving application paths."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

DEFAULT_CONFIG_DIR = "~/.stmtnormalizer"
DEFAULT_CONFIG_FILE = "config.yaml"
DEFAULT_EXPORT_DIR = "~/.stmtnormalizer/exports"

CONFIG_DIR_ENV = "STMTNORM_CONFIG_DIR"
CONFIG_FILE_ENV = "STMTNORM_CONFIG_PATH"
EXPORT_DIR_ENV = "STMTNORM_EXPORT_DIR"


def _expand(path_str: str) -> Path:
    """Return a Path with user and environment variables expanded."""
    return Path(os.path.expandvars(path_str)).expanduser()


def get_config_dir(env: Mapping[str, str] | None = None) -> Path:
    """Return the configuration directory."""
    env = env or os.environ
    return _expand(env.get(CONFIG_DIR_ENV, DEFAULT_CONFIG_DIR))


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Return the config file path: explicit file override, else inside the config dir."""
    env = env or os.environ
    override = env.get(CONFIG_FILE_ENV)
    if override:
        return _expand(override)
    return get_config_dir(env=env) / DEFAULT_CONFIG_FILE


def default_export_dir(env: Mapping[str, str] | None = None) -> Path:
    """Return the directory CSV exports are written to when none is given.

    The directory is not created here; ``normalize`` creates it on first write.
    """

    env = env or os.environ
    override = env.get(EXPORT_DIR_ENV)
    return _expand(override) if override else _expand(DEFAULT_EXPORT_DIR)


def resolve_path(path_str: str | Path) -> Path:
    """Expand user and environment variables for arbitrary paths."""
    if isinstance(path_str, Path):
        return _expand(str(path_str))
    return _expand(path_str)
