"""Linux/X11 window source driven through wmctrl and xprop."""

from __future__ import annotations

import logging
import os

from core.errors import ToolInvocationFailure
from executor.command_executor import ToolRunner
from os_controller import xtool_parser
from os_controller.base_controller import Rect, WindowHandle, WindowSource, WindowType

logger = logging.getLogger("rar.x11")


class X11Window(WindowHandle):
    """A client window as listed by ``wmctrl``."""

    def __init__(
        self,
        xid: str,
        title: str | None,
        window_type: WindowType,
        rect: Rect,
        runner: ToolRunner,
        wmctrl: str = "wmctrl",
    ) -> None:
        self.xid = xid
        self._title = title
        self._window_type = window_type
        self._rect = rect
        self.runner = runner
        self.wmctrl = wmctrl

    def __repr__(self) -> str:
        return f"<X11Window {self.xid} {self._title!r}>"

    @property
    def title(self) -> str | None:
        return self._title

    @property
    def window_type(self) -> WindowType:
        return self._window_type

    def frame_rect(self) -> Rect:
        return self._rect

    def description(self) -> str:
        return f"{self.xid} ({self._title or ''})"

    def compositor_xid(self) -> int | None:
        return int(self.xid, 16)

    def move_resize_frame(self, rect: Rect) -> None:
        # Maximized windows ignore move requests until unmaximized.
        self.runner(
            [self.wmctrl, "-i", "-r", self.xid, "-b", "remove,maximized_vert,maximized_horz"],
            allow_empty=True,
        )
        geometry = f"0,{rect.x},{rect.y},{rect.width},{rect.height}"
        self.runner([self.wmctrl, "-i", "-r", self.xid, "-e", geometry], allow_empty=True)
        self._rect = rect

    def raise_window(self) -> None:
        self.runner([self.wmctrl, "-i", "-a", self.xid], allow_empty=True)


class LinuxController(WindowSource):
    """Enumerates managed X11 client windows."""

    def __init__(
        self,
        runner: ToolRunner,
        wmctrl: str = "wmctrl",
        xprop: str = "xprop",
    ) -> None:
        self.runner = runner
        self.wmctrl = wmctrl
        self.xprop = xprop

    def _ensure_display(self) -> None:
        if os.name != "posix":
            raise RuntimeError("Linux controller inactive on non-posix platform.")
        if not os.environ.get("DISPLAY"):
            raise RuntimeError("No X11 display available (DISPLAY is not set).")

    def list_windows(self) -> list[WindowHandle]:
        self._ensure_display()
        try:
            output = self.runner([self.wmctrl, "-l", "-G", "-p"])
        except ToolInvocationFailure as exc:
            logger.warning("Failed to list windows: %s", exc)
            return []
        return [
            X11Window(
                xid=entry.xid,
                title=entry.title,
                window_type=self._window_type(entry.xid),
                rect=entry.rect,
                runner=self.runner,
                wmctrl=self.wmctrl,
            )
            for entry in xtool_parser.parse_wmctrl_list(output)
        ]

    def _window_type(self, xid: str) -> WindowType:
        try:
            output = self.runner([self.xprop, "-id", xid, "_NET_WM_WINDOW_TYPE"])
        except ToolInvocationFailure as exc:
            logger.debug("Window type unavailable for %s: %s", xid, exc)
            return WindowType.UNKNOWN
        return xtool_parser.parse_window_type(output)
