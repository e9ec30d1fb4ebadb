"""Persisted window state models."""

from __future__ import annotations

from pydantic import BaseModel, TypeAdapter

from os_controller.base_controller import Rect


class WindowRecord(BaseModel):
    """Saved geometry of one window, keyed by its resolved identifier."""

    id: str | None = None
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_rect(cls, window_id: str | None, rect: Rect) -> WindowRecord:
        return cls(id=window_id, x=rect.x, y=rect.y, width=rect.width, height=rect.height)

    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


SavedState = list[WindowRecord]

saved_state_adapter: TypeAdapter[list[WindowRecord]] = TypeAdapter(list[WindowRecord])
