"""Host shell model: named handlers, a window source and an event loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from os_controller.base_controller import WindowSource

logger = logging.getLogger("rar.host")


class ShellHost:
    """Owns the handler table that extensions wrap and the loop they schedule on."""

    def __init__(
        self,
        window_source: WindowSource,
        loop: asyncio.AbstractEventLoop,
        handlers: dict[str, Callable[..., Any]] | None = None,
    ) -> None:
        self.window_source = window_source
        self.loop = loop
        self.handlers: dict[str, Callable[..., Any]] = dict(handlers or {})

    def invoke(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Call handler *name*; a missing handler is logged and ignored."""
        handler = self.handlers.get(name)
        if handler is None:
            logger.warning("No handler registered for '%s'", name)
            return None
        return handler(*args, **kwargs)
