"""Enable/disable lifecycle: save on restart, restore shortly after start."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from core.errors import CorruptState, SettingsStoreError
from core.overrides import OverrideRegistry, save_before
from os_controller.shell_host import ShellHost
from persistence.state_store import RestoreReport, StateStore

logger = logging.getLogger("rar.lifecycle")

RESTART_HANDLER = "restart"
DEFAULT_RESTORE_DELAY = 1.0


@dataclass
class ExtensionContext:
    """Everything owned by one enabled period; discarded on disable."""

    state_store: StateStore
    overrides: OverrideRegistry
    restore_handle: asyncio.TimerHandle | None = None
    last_report: RestoreReport | None = None


class RestoreExtension:
    """Hooks window-state persistence into a shell host."""

    def __init__(
        self,
        host: ShellHost,
        build_state_store: Callable[[], StateStore],
        restore_delay: float = DEFAULT_RESTORE_DELAY,
    ) -> None:
        self.host = host
        self.build_state_store = build_state_store
        self.restore_delay = restore_delay
        self.context: ExtensionContext | None = None

    @property
    def enabled(self) -> bool:
        return self.context is not None

    def enable(self) -> None:
        """Schedule the one-shot restore and wrap the host's restart handler."""
        if self.context is not None:
            logger.warning("Extension already enabled")
            return
        state_store = self.build_state_store()
        context = ExtensionContext(
            state_store=state_store,
            overrides=OverrideRegistry(self.host.handlers),
        )
        self.context = context
        context.restore_handle = self.host.loop.call_later(self.restore_delay, self._restore_once)
        context.overrides.install(
            RESTART_HANDLER,
            lambda original: save_before(original, lambda: self._save(state_store)),
        )
        logger.info("Enabled; restoring windows in %.1fs", self.restore_delay)

    def disable(self) -> None:
        """Cancel a pending restore and remove the restart override."""
        context = self.context
        if context is None:
            return
        if context.restore_handle is not None:
            context.restore_handle.cancel()
            context.restore_handle = None
        context.overrides.remove_all()
        self.context = None
        logger.info("Disabled")

    def _save(self, state_store: StateStore) -> None:
        state_store.save(self.host.window_source.list_windows())

    def _restore_once(self) -> None:
        context = self.context
        if context is None:
            return
        context.restore_handle = None
        try:
            context.last_report = context.state_store.restore_saved(
                self.host.window_source.list_windows()
            )
        except (CorruptState, SettingsStoreError) as exc:
            logger.warning("Not restoring windows: %s", exc)
        except RuntimeError as exc:
            # Raised by window sources with no display to talk to.
            logger.warning("Not restoring windows, cannot enumerate them: %s", exc)
