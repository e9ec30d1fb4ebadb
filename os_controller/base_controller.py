"""Base interfaces for host windows and window enumeration."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class WindowType(str, Enum):
    NORMAL = "normal"
    DESKTOP = "desktop"
    DOCK = "dock"
    DIALOG = "dialog"
    UTILITY = "utility"
    SPLASH = "splash"
    MENU = "menu"
    TOOLBAR = "toolbar"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Rect:
    """Frame rectangle in root-window coordinates."""

    x: int
    y: int
    width: int
    height: int


class WindowHandle(ABC):
    """Opaque reference to a live window exposed by the host."""

    @property
    @abstractmethod
    def title(self) -> str | None:
        """Window title, if the host has one."""

    @property
    @abstractmethod
    def window_type(self) -> WindowType:
        """Window type hint."""

    @abstractmethod
    def frame_rect(self) -> Rect:
        """Return the current frame rectangle."""

    @abstractmethod
    def description(self) -> str:
        """Human-readable description; may raise on undecodable text."""

    @abstractmethod
    def compositor_xid(self) -> int | None:
        """Raw compositing-surface X id, when the host exposes one."""

    @abstractmethod
    def move_resize_frame(self, rect: Rect) -> None:
        """Move and resize the window frame."""

    @abstractmethod
    def raise_window(self) -> None:
        """Raise the window to the front."""


class WindowSource(ABC):
    """Enumerates the host's live windows."""

    @abstractmethod
    def list_windows(self) -> list[WindowHandle]:
        """Return live windows in stacking/enumeration order."""
