"""Command execution wrapper."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path

from core.errors import ToolInvocationFailure

logger = logging.getLogger("rar.commands")

CommandRunner = Callable[[list[str]], str]


def run_command(
    command: list[str],
    cwd: Path | None = None,
    timeout: float | None = None,
) -> tuple[int, str, str]:
    """Run command and return (exit_code, stdout, stderr)."""
    proc = subprocess.run(
        command,
        cwd=cwd,
        capture_output=True,
        text=True,
        errors="replace",
        timeout=timeout,
    )
    return proc.returncode, proc.stdout, proc.stderr


class ToolRunner:
    """Runs external introspection tools and returns their stdout.

    Commands are always argument vectors; nothing is passed through a shell.
    Any failure (missing binary, timeout, non-zero exit, empty output) is
    raised as ``ToolInvocationFailure``.
    """

    def __init__(self, timeout: float = 2.0) -> None:
        self.timeout = timeout
        self.calls = 0

    def __call__(self, command: list[str], allow_empty: bool = False) -> str:
        self.calls += 1
        logger.debug("Running %s", command)
        try:
            code, stdout, stderr = run_command(command, timeout=self.timeout)
        except FileNotFoundError as exc:
            raise ToolInvocationFailure(command, None, f"command not found: {exc}") from exc
        except subprocess.TimeoutExpired as exc:
            raise ToolInvocationFailure(command, None, f"timed out after {self.timeout}s") from exc
        if code != 0:
            raise ToolInvocationFailure(command, code, stderr)
        if not allow_empty and not stdout.strip():
            raise ToolInvocationFailure(command, code, "empty output")
        return stdout
