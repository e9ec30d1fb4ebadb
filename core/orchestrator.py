"""Top-level application orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.policy_runtime import ensure_runtime_dirs, load_effective_config, resolve_root
from executor.command_executor import ToolRunner
from identity.resolver import IdentityResolver
from identity.strategies import build_strategies
from os_controller.base_controller import WindowSource, WindowType
from os_controller.linux_controller import LinuxController
from persistence.settings_store import SQLSettingsStore, SettingsStore
from persistence.sql_store import SettingsDatabase
from persistence.state_store import DEFAULT_STATE_KEY, StateStore

DEFAULT_STRATEGIES = ["description", "tree", "client_list"]


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    paths: dict[str, Path]
    settings: SettingsStore
    resolver: IdentityResolver
    state_store: StateStore
    window_source: WindowSource
    runner: ToolRunner


class Orchestrator:
    """Creates and wires runtime components for CLI use."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = resolve_root(root)

    def build(self) -> RuntimeBundle:
        config = load_effective_config(self.root)
        paths = ensure_runtime_dirs(self.root, config)
        commands_cfg = dict(config.get("commands", {}))

        settings = SQLSettingsStore(SettingsDatabase(paths["db_path"]))

        runner = ToolRunner(timeout=float(commands_cfg.get("timeout_seconds", 2.0)))
        resolver = self.build_resolver(config, runner)
        window_source = LinuxController(
            runner,
            wmctrl=str(commands_cfg.get("wmctrl", "wmctrl")),
            xprop=str(commands_cfg.get("xprop", "xprop")),
        )

        return RuntimeBundle(
            config=config,
            paths=paths,
            settings=settings,
            resolver=resolver,
            state_store=self.build_state_store(config, settings, resolver),
            window_source=window_source,
            runner=runner,
        )

    @staticmethod
    def build_resolver(config: dict[str, Any], runner: ToolRunner) -> IdentityResolver:
        identity_cfg = config.get("identity", {})
        strategies = build_strategies(
            list(identity_cfg.get("strategies", DEFAULT_STRATEGIES)),
            runner,
            commands_cfg=config.get("commands", {}),
            marker_property=str(
                identity_cfg.get("marker_property", "_NO_TITLE_BAR_ORIGINAL_STATE")
            ),
        )
        return IdentityResolver(strategies)

    @staticmethod
    def build_state_store(
        config: dict[str, Any],
        settings: SettingsStore,
        resolver: IdentityResolver,
    ) -> StateStore:
        restore_cfg = config.get("restore", {})
        skip_types = [WindowType(t) for t in restore_cfg.get("skip_window_types", ["desktop"])]
        return StateStore(
            settings=settings,
            resolver=resolver,
            state_key=str(config.get("settings", {}).get("state_key", DEFAULT_STATE_KEY)),
            skip_window_types=skip_types,
        )
