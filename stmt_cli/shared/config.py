"""Configuration loading utilities for the statement normalizer."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

from . import paths
from .exceptions import ConfigurationError

KNOWN_BUCKETS: tuple[str, ...] = ("positions", "transactions", "fees")
DISPLAY_FORMATS: tuple[str, ...] = ("table", "json")


@dataclass(frozen=True, slots=True)
class ExportSettings:
    """CSV export configuration."""

    output_dir: Path
    buckets: tuple[str, ...]
    include_empty: bool


@dataclass(frozen=True, slots=True)
class DisplaySettings:
    """Statement summary rendering configuration."""

    format: str  # "table" or "json"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Top-level application configuration."""

    source_path: Path
    export: ExportSettings
    display: DisplaySettings


def _default_config(env: Mapping[str, str]) -> dict[str, Any]:
    return {
        "export": {
            "output_dir": str(paths.default_export_dir(env=env)),
            "buckets": list(KNOWN_BUCKETS),
            "include_empty": False,
        },
        "display": {
            "format": "table",
        },
    }


ENV_OVERRIDE_SPEC: dict[str, tuple[str, type]] = {
    "export.output_dir": (paths.EXPORT_DIR_ENV, str),
    "export.buckets": ("STMTNORM_EXPORT_BUCKETS", list),
    "export.include_empty": ("STMTNORM_EXPORT_INCLUDE_EMPTY", bool),
    "display.format": ("STMTNORM_DISPLAY_FORMAT", str),
}


def load_config(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load configuration from defaults, YAML file, and env overrides."""
    env = dict(os.environ if env is None else env)
    resolved_config_path = _resolve_config_path(config_path, env)
    file_data = _load_yaml(resolved_config_path)
    defaults = _default_config(env)
    merged: dict[str, Any] = _deep_merge(defaults, file_data)
    merged = _apply_env_overrides(merged, env)
    return _build_config(merged, resolved_config_path)


def _resolve_config_path(
    config_path: str | Path | None, env: Mapping[str, str]
) -> Path:
    if config_path:
        return paths.resolve_path(config_path)
    return paths.default_config_path(env=env)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Config file at {path} is not valid YAML: {exc}") from exc
        if not isinstance(data, MutableMapping):
            raise ConfigurationError(f"Config file at {path} must define a mapping root object.")
        return dict(data)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides(config: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    config_copy = _deep_merge(config, {})
    for dotted_key, (env_key, expected_type) in ENV_OVERRIDE_SPEC.items():
        if env_key not in env:
            continue
        raw_value = env[env_key]
        try:
            value = _coerce_env_value(raw_value, expected_type)
        except ValueError as exc:
            raise ConfigurationError(
                f"Environment override {env_key} has invalid value '{raw_value}': {exc}"
            ) from exc
        _assign_nested(config_copy, dotted_key.split("."), value)
    return config_copy


def _coerce_env_value(raw: str, expected_type: type) -> Any:
    cleaned = raw.strip()
    if expected_type is bool:
        lowered = cleaned.lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        raise ValueError("expected boolean (true/false)")
    if expected_type is list:
        if not cleaned:
            return []
        return tuple(part.strip() for part in cleaned.split(",") if part.strip())
    return cleaned


def _assign_nested(target: MutableMapping[str, Any], keys: list[str], value: Any) -> None:
    current = target
    for key in keys[:-1]:
        if key not in current or not isinstance(current[key], MutableMapping):
            current[key] = {}
        current = current[key]  # type: ignore[assignment]
    current[keys[-1]] = value


def _build_config(data: Mapping[str, Any], source_path: Path) -> AppConfig:
    try:
        export_cfg = data["export"]
        buckets = tuple(str(name).strip().lower() for name in export_cfg["buckets"])
        export = ExportSettings(
            output_dir=paths.resolve_path(export_cfg["output_dir"]),
            buckets=buckets,
            include_empty=bool(export_cfg["include_empty"]),
        )
        display = DisplaySettings(format=str(data["display"]["format"]).strip().lower())
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid configuration structure: {exc}") from exc

    unknown = [name for name in export.buckets if name not in KNOWN_BUCKETS]
    if unknown:
        raise ConfigurationError(
            f"Unknown export bucket(s): {', '.join(unknown)}. Expected any of {', '.join(KNOWN_BUCKETS)}."
        )
    if display.format not in DISPLAY_FORMATS:
        raise ConfigurationError(
            f"Unsupported display format '{display.format}'. Expected one of {', '.join(DISPLAY_FORMATS)}."
        )

    return AppConfig(source_path=source_path, export=export, display=display)
