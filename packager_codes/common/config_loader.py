"""Configuration loading and validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from packager_codes.common.errors import ConfigError
from packager_codes.common.fs import read_yaml
from packager_codes.common.schema import validate_config


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _read_config_file(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        return read_yaml(path) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unreadable config file {path}: {exc}") from exc


def load_config(
    config_path: Path,
    *,
    overlay_path: Path | None = None,
    allow_unknown: bool = False,
) -> dict:
    cfg = _read_config_file(config_path)
    if overlay_path is not None and overlay_path.exists():
        cfg = _deep_merge(cfg, _read_config_file(overlay_path))
    return validate_config(cfg, allow_unknown=allow_unknown)


def apply_overrides(cfg: dict, *, max_pages: int | None = None, geocode_cache: bool | None = None) -> dict:
    overrides: dict = {}
    if max_pages is not None:
        overrides.setdefault("directory", {})["max_pages"] = max_pages
    if geocode_cache is not None:
        overrides.setdefault("geocoder", {})["cache"] = geocode_cache
    if not overrides:
        return cfg
    return validate_config(_deep_merge(cfg, overrides), allow_unknown=True)
