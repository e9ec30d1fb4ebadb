"""Configuration loading tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.orchestrator import Orchestrator
from core.policy_runtime import ensure_runtime_dirs, load_effective_config, load_yaml, merge_dicts, resolve_root
from os_controller.base_controller import WindowType

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def test_load_yaml_missing_file_is_empty(tmp_path: Path) -> None:
    assert load_yaml(tmp_path / "absent.yaml") == {}


def test_load_yaml_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_yaml(path)


def test_merge_dicts_is_recursive() -> None:
    merged = merge_dicts(
        {"restore": {"delay_seconds": 1.0, "skip_window_types": ["desktop"]}, "x": 1},
        {"restore": {"delay_seconds": 2.5}},
    )

    assert merged == {"restore": {"delay_seconds": 2.5, "skip_window_types": ["desktop"]}, "x": 1}


def test_local_yaml_overrides_defaults(tmp_path: Path) -> None:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "default.yaml").write_text(
        (PROJECT_ROOT / "config" / "default.yaml").read_text(encoding="utf-8"), encoding="utf-8"
    )
    (config_dir / "local.yaml").write_text(
        "restore:\n  skip_window_types: [desktop, dock]\nsettings:\n  state_key: layout\n",
        encoding="utf-8",
    )

    config = load_effective_config(tmp_path)

    assert config["restore"]["delay_seconds"] == 1.0
    assert config["restore"]["skip_window_types"] == ["desktop", "dock"]
    bundle = Orchestrator(root=tmp_path).build()
    assert bundle.state_store.state_key == "layout"
    assert bundle.state_store.skip_window_types == {WindowType.DESKTOP, WindowType.DOCK}


def test_shipped_defaults() -> None:
    config = load_effective_config(PROJECT_ROOT)

    assert config["settings"]["state_key"] == "saved-state"
    assert config["identity"]["strategies"] == ["description", "tree", "client_list"]


def test_ensure_runtime_dirs_creates_parents(tmp_path: Path) -> None:
    paths = ensure_runtime_dirs(tmp_path, {"paths": {"db_path": "a/b/s.db", "log_path": "c/l.log"}})

    assert paths["db_path"] == (tmp_path / "a/b/s.db").resolve()
    assert paths["db_path"].parent.is_dir()
    assert paths["log_path"].parent.is_dir()


def test_resolve_root_prefers_env_over_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RESTORE_AFTER_RESTART_HOME", str(tmp_path))

    assert resolve_root() == tmp_path.resolve()
    assert resolve_root(tmp_path / "explicit") == (tmp_path / "explicit").resolve()


def test_orchestrator_without_config_uses_code_defaults(tmp_path: Path) -> None:
    bundle = Orchestrator(root=tmp_path).build()

    assert bundle.state_store.state_key == "saved-state"
    assert [s.name for s in bundle.resolver.strategies] == ["description", "tree", "client_list"]
    assert bundle.paths["db_path"].exists()
