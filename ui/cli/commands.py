"""Typer command handlers."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path

import typer

from core.daemon import run_daemon
from core.errors import CorruptState, SettingsStoreError
from core.orchestrator import Orchestrator, RuntimeBundle
from persistence.records import saved_state_adapter

logger = logging.getLogger("rar.cli")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _runtime(root: Path | None = None, verbose: bool = False) -> RuntimeBundle:
    try:
        bundle = Orchestrator(root=root).build()
    except SettingsStoreError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    _configure_logging(bundle, verbose)
    return bundle


def _configure_logging(bundle: RuntimeBundle, verbose: bool) -> None:
    root_logger = logging.getLogger("rar")
    if root_logger.handlers:
        return
    level_name = str(bundle.config.get("logging", {}).get("level", "INFO")).upper()
    level = logging.DEBUG if verbose else getattr(logging, level_name, logging.INFO)
    formatter = logging.Formatter(_LOG_FORMAT)
    for handler in (
        logging.StreamHandler(),
        logging.FileHandler(bundle.paths["log_path"], encoding="utf-8"),
    ):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


def _list_windows(bundle: RuntimeBundle) -> list:
    try:
        return bundle.window_source.list_windows()
    except RuntimeError as exc:
        typer.echo(f"Cannot enumerate windows: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def save(root: Path | None = None, verbose: bool = False) -> None:
    """Save geometry of the current windows."""
    bundle = _runtime(root, verbose)
    state = bundle.state_store.save(_list_windows(bundle))
    unresolved = sum(1 for record in state if not record.id)
    typer.echo(f"Saved {len(state)} windows ({unresolved} without identifier).")


def restore(delay: float = 0.0, root: Path | None = None, verbose: bool = False) -> None:
    """Apply saved geometry to the current windows."""
    bundle = _runtime(root, verbose)
    if delay > 0:
        time.sleep(delay)
    try:
        state = bundle.state_store.load()
    except CorruptState as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    if not state:
        typer.echo("No saved window state.")
        return
    report = bundle.state_store.restore(state, _list_windows(bundle))
    typer.echo(
        f"Restored {len(report.restored)} windows; "
        f"{len(report.unmatched)} unmatched, {report.skipped_without_id} without identifier."
    )


def show(root: Path | None = None, verbose: bool = False) -> None:
    """Print the saved state."""
    bundle = _runtime(root, verbose)
    try:
        state = bundle.state_store.load()
    except CorruptState as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps(saved_state_adapter.dump_python(state), indent=2))


def resolve(root: Path | None = None, verbose: bool = False) -> None:
    """Print the resolved identifier of every live window."""
    bundle = _runtime(root, verbose)
    for handle in _list_windows(bundle):
        window_id = bundle.resolver.resolve(handle) or "-"
        typer.echo(f"{window_id}\t{handle.window_type.value}\t{handle.title or ''}")


def clear(root: Path | None = None, verbose: bool = False) -> None:
    """Delete the saved state."""
    bundle = _runtime(root, verbose)
    bundle.state_store.clear()
    typer.echo("Cleared saved window state.")


def daemon(root: Path | None = None, verbose: bool = False) -> None:
    """Restore after start and save on SIGHUP."""
    bundle = _runtime(root, verbose)
    typer.echo("Waiting for SIGHUP to save window state; SIGINT/SIGTERM to quit.")
    run_daemon(bundle)


def config_show(root: Path | None = None, verbose: bool = False) -> None:
    """Show effective runtime config."""
    bundle = _runtime(root, verbose)
    typer.echo(json.dumps(bundle.config, indent=2, default=str))
