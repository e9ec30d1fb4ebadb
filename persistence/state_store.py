"""Save, load and re-apply window geometry keyed by window identifier."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from pydantic import ValidationError

from core.errors import CorruptState
from identity.resolver import IdentityResolver
from os_controller.base_controller import WindowHandle, WindowType
from persistence.records import SavedState, WindowRecord, saved_state_adapter
from persistence.settings_store import SettingsStore

logger = logging.getLogger("rar.state_store")

DEFAULT_STATE_KEY = "saved-state"


@dataclass
class RestoreReport:
    """What a restore pass did. Unmatched records are normal, not errors."""

    restored: list[str] = field(default_factory=list)
    unmatched: list[str] = field(default_factory=list)
    skipped_without_id: int = 0


class StateStore:
    """Persists the window list under a single settings key."""

    def __init__(
        self,
        settings: SettingsStore,
        resolver: IdentityResolver,
        state_key: str = DEFAULT_STATE_KEY,
        skip_window_types: Iterable[WindowType] = (WindowType.DESKTOP,),
    ) -> None:
        self.settings = settings
        self.resolver = resolver
        self.state_key = state_key
        self.skip_window_types = frozenset(skip_window_types)

    def _eligible(self, handles: Iterable[WindowHandle]) -> list[WindowHandle]:
        return [h for h in handles if h.window_type not in self.skip_window_types]

    def save(self, handles: Sequence[WindowHandle]) -> SavedState:
        """Record every eligible window and overwrite the persisted value.

        Windows whose identifier cannot be resolved are still recorded, with
        a null id that will never match on restore. A window whose frame can
        no longer be read (it closed while being enumerated) is left out, so
        the record count can be lower than the number of eligible windows.
        """
        state: SavedState = []
        for handle in self._eligible(handles):
            window_id = self.resolver.resolve(handle)
            try:
                rect = handle.frame_rect()
            except Exception as exc:
                logger.warning("Skipping window %r, frame unavailable: %s", handle.title, exc)
                continue
            state.append(WindowRecord.from_rect(window_id, rect))

        self.settings.set(self.state_key, saved_state_adapter.dump_json(state).decode("utf-8"))
        unresolved = sum(1 for record in state if not record.id)
        logger.info("Saved %d windows (%d without identifier)", len(state), unresolved)
        return state

    def load(self) -> SavedState:
        """Read the persisted state; a never-written key is an empty state."""
        raw = self.settings.get(self.state_key)
        if raw is None or not raw.strip():
            return []
        try:
            return saved_state_adapter.validate_json(raw)
        except ValidationError as exc:
            errors = exc.errors()
            reason = str(errors[0]["msg"]) if errors else str(exc)
            raise CorruptState(raw, reason) from exc

    def restore(self, state: SavedState, live_handles: Sequence[WindowHandle]) -> RestoreReport:
        """Move each saved window back to its recorded rectangle.

        Matching is by identifier, first live match wins. Each live window is
        resolved at most once per pass. Records that match nothing are skipped.
        """
        report = RestoreReport()
        if not state:
            return report
        live_by_id = self._index_by_id(self._eligible(live_handles))
        for record in state:
            if not record.id:
                report.skipped_without_id += 1
                continue
            handle = live_by_id.get(record.id)
            if handle is None:
                logger.debug("No live window for %s", record.id)
                report.unmatched.append(record.id)
                continue
            try:
                handle.move_resize_frame(record.rect())
                handle.raise_window()
            except Exception as exc:
                logger.warning("Could not restore window %s: %s", record.id, exc)
                report.unmatched.append(record.id)
                continue
            report.restored.append(record.id)

        logger.info(
            "Restored %d of %d saved windows", len(report.restored), len(state)
        )
        return report

    def restore_saved(self, live_handles: Sequence[WindowHandle]) -> RestoreReport:
        """Load the persisted state and apply it to *live_handles*."""
        return self.restore(self.load(), live_handles)

    def clear(self) -> None:
        self.settings.delete(self.state_key)

    def _index_by_id(self, handles: Sequence[WindowHandle]) -> dict[str, WindowHandle]:
        live_by_id: dict[str, WindowHandle] = {}
        for handle in handles:
            window_id = self.resolver.resolve(handle)
            if window_id and window_id not in live_by_id:
                live_by_id[window_id] = handle
        return live_by_id
