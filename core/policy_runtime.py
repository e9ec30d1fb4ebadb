"""Configuration loading and runtime directory bootstrapping."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

HOME_ENV_VAR = "RESTORE_AFTER_RESTART_HOME"


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_root(root: Path | None = None) -> Path:
    """Explicit root, else $RESTORE_AFTER_RESTART_HOME, else the project root."""
    if root is not None:
        return root.resolve()
    env_root = os.environ.get(HOME_ENV_VAR)
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path(__file__).resolve().parents[1]


def ensure_runtime_dirs(root: Path, config: dict[str, Any]) -> dict[str, Path]:
    """Ensure settings and log directories exist and return resolved paths."""
    paths_cfg = config.get("paths", {})
    db_path = (root / paths_cfg.get("db_path", "workspace/settings.db")).resolve()
    log_path = (root / paths_cfg.get("log_path", "logs/restore-after-restart.log")).resolve()

    db_path.parent.mkdir(parents=True, exist_ok=True)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    return {
        "db_path": db_path,
        "log_path": log_path,
    }


def load_effective_config(root: Path) -> dict[str, Any]:
    """Load default.yaml and merge the optional local.yaml over it."""
    config_dir = root / "config"
    default_cfg = load_yaml(config_dir / "default.yaml")
    local_cfg = load_yaml(config_dir / "local.yaml")
    return merge_dicts(default_cfg, local_cfg)
