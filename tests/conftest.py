"""Shared fixtures: in-memory windows standing in for a host compositor."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from os_controller.base_controller import Rect, WindowHandle, WindowSource, WindowType


class FakeWindow(WindowHandle):
    def __init__(
        self,
        title: str | None = "Untitled",
        rect: Rect = Rect(0, 0, 100, 100),
        window_type: WindowType = WindowType.NORMAL,
        description: str | Exception = "",
        surface_xid: int | None = None,
    ) -> None:
        self._title = title
        self.rect = rect
        self._window_type = window_type
        self._description = description
        self.surface_xid = surface_xid
        self.moves: list[Rect] = []
        self.raised = 0

    @property
    def title(self) -> str | None:
        return self._title

    @property
    def window_type(self) -> WindowType:
        return self._window_type

    def frame_rect(self) -> Rect:
        return self.rect

    def description(self) -> str:
        if isinstance(self._description, Exception):
            raise self._description
        return self._description

    def compositor_xid(self) -> int | None:
        return self.surface_xid

    def move_resize_frame(self, rect: Rect) -> None:
        self.moves.append(rect)
        self.rect = rect

    def raise_window(self) -> None:
        self.raised += 1


class FakeWindowSource(WindowSource):
    def __init__(self, windows: list[WindowHandle] | None = None) -> None:
        self.windows = list(windows or [])

    def list_windows(self) -> list[WindowHandle]:
        return list(self.windows)


@pytest.fixture
def make_window() -> Callable[..., FakeWindow]:
    return FakeWindow


@pytest.fixture
def make_source() -> Callable[..., FakeWindowSource]:
    return FakeWindowSource
