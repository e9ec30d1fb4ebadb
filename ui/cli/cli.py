"""CLI entrypoint for restore-after-restart."""

from __future__ import annotations

from pathlib import Path

import typer

from ui.cli import commands

app = typer.Typer(help="Save window positions before a shell restart and restore them after.")
config_app = typer.Typer(help="Configuration commands")


@app.callback()
def main_callback(
    ctx: typer.Context,
    root: Path = typer.Option(None, "--root", help="Directory holding config/ and runtime data"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Global options."""
    ctx.obj = {"root": root, "verbose": verbose}


@app.command("save")
def save_cmd(ctx: typer.Context) -> None:
    """Save geometry of the current windows."""
    commands.save(**ctx.obj)


@app.command("restore")
def restore_cmd(
    ctx: typer.Context,
    delay: float = typer.Option(0.0, "--delay", min=0.0, help="Seconds to wait before restoring"),
) -> None:
    """Move windows back to their saved geometry."""
    commands.restore(delay=delay, **ctx.obj)


@app.command("show")
def show_cmd(ctx: typer.Context) -> None:
    """Print the saved window state."""
    commands.show(**ctx.obj)


@app.command("resolve")
def resolve_cmd(ctx: typer.Context) -> None:
    """Print the identifier resolved for each live window."""
    commands.resolve(**ctx.obj)


@app.command("clear")
def clear_cmd(ctx: typer.Context) -> None:
    """Delete the saved window state."""
    commands.clear(**ctx.obj)


@app.command("daemon")
def daemon_cmd(ctx: typer.Context) -> None:
    """Restore shortly after start; save on SIGHUP."""
    commands.daemon(**ctx.obj)


@config_app.command("show")
def config_show_cmd(ctx: typer.Context) -> None:
    """Show effective configuration."""
    commands.config_show(**ctx.obj)


app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
