"""Identity resolver: derives a stable identifier for a live window."""

from __future__ import annotations

import logging
import weakref

from core.errors import ResolutionFailure, ToolInvocationFailure
from identity.strategies import IdentityStrategy
from os_controller.base_controller import WindowHandle

logger = logging.getLogger("rar.identity")


class IdentityResolver:
    """Runs the strategy cascade and caches the first success per handle."""

    def __init__(self, strategies: list[IdentityStrategy]) -> None:
        self.strategies = strategies
        self._cache: weakref.WeakKeyDictionary[WindowHandle, str] = weakref.WeakKeyDictionary()

    def resolve(self, handle: WindowHandle) -> str | None:
        """Return the window identifier, or ``None`` when every strategy fails."""
        cached = self._cache.get(handle)
        if cached is not None:
            return cached

        for strategy in self.strategies:
            try:
                xid = strategy.resolve(handle)
            except (ResolutionFailure, ToolInvocationFailure) as exc:
                logger.debug("Strategy %s failed for %r: %s", strategy.name, handle.title, exc)
                continue
            self._cache[handle] = xid
            logger.debug("Resolved %r to %s via %s", handle.title, xid, strategy.name)
            return xid

        logger.info("Could not resolve an identifier for window %r", handle.title)
        return None

    def cached(self, handle: WindowHandle) -> str | None:
        return self._cache.get(handle)

    def forget(self, handle: WindowHandle) -> None:
        self._cache.pop(handle, None)

    def clear_cache(self) -> None:
        self._cache.clear()
