"""Error taxonomy for window identity resolution and state persistence."""

from __future__ import annotations


class RestoreAfterRestartError(Exception):
    """Base class for all errors raised by this package."""


class ResolutionFailure(RestoreAfterRestartError):
    """An identity strategy could not determine a window identifier."""


class ToolInvocationFailure(RestoreAfterRestartError):
    """An external command was missing, timed out or exited non-zero."""

    def __init__(self, command: list[str], returncode: int | None, stderr: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or "no output"
        super().__init__(f"{command[0]} failed (exit={returncode}): {detail}")


class CorruptState(RestoreAfterRestartError):
    """The persisted state blob could not be parsed."""

    def __init__(self, raw_value: str, reason: str) -> None:
        self.raw_value = raw_value
        self.reason = reason
        super().__init__(f"Saved window state is corrupt: {reason}")


class SettingsStoreError(RestoreAfterRestartError):
    """The settings database could not be opened, read or written."""
