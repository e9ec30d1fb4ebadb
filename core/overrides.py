"""Wrapping and un-wrapping of named host handlers."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, MutableMapping
from typing import Any

logger = logging.getLogger("rar.lifecycle")

Handler = Callable[..., Any]
HandlerFactory = Callable[[Handler | None], Handler]

_ABSENT = object()


def save_before(original: Handler | None, save: Callable[[], Any]) -> Handler:
    """Return a handler that runs *save* and then delegates to *original*.

    The original's arguments and return value pass through untouched. A
    failing save is logged and never blocks the original handler.
    """

    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            save()
        except Exception:
            logger.exception("Saving window state before restart failed")
        if original is None:
            return None
        return original(*args, **kwargs)

    if original is not None:
        functools.update_wrapper(wrapper, original)
    return wrapper


class OverrideRegistry:
    """Single-slot registry of replaced handlers, keyed by handler name."""

    def __init__(self, table: MutableMapping[str, Handler]) -> None:
        self.table = table
        self._originals: dict[str, Any] = {}

    def install(self, name: str, factory: HandlerFactory) -> Handler:
        """Replace handler *name* with ``factory(previous)`` and remember *previous*."""
        if name in self._originals:
            raise ValueError(f"Handler '{name}' is already overridden.")
        previous = self.table.get(name, _ABSENT)
        self._originals[name] = previous
        replacement = factory(None if previous is _ABSENT else previous)
        self.table[name] = replacement
        return replacement

    def remove(self, name: str) -> None:
        """Put back exactly what was there before, including nothing at all."""
        if name not in self._originals:
            return
        previous = self._originals.pop(name)
        if previous is _ABSENT:
            self.table.pop(name, None)
        else:
            self.table[name] = previous

    def remove_all(self) -> None:
        for name in list(self._originals):
            self.remove(name)

    def is_installed(self, name: str) -> bool:
        return name in self._originals
