"""Key/value settings stores standing in for the host's settings backend."""

from __future__ import annotations

from abc import ABC, abstractmethod

from persistence.schemas import SettingRecord
from persistence.sql_store import SettingsDatabase


class SettingsStore(ABC):
    """A store of named string settings."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value for *key*, or ``None`` if it was never written."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Write *value*, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key*; missing keys are ignored."""


class InMemorySettingsStore(SettingsStore):
    """Dictionary-backed transient settings."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class SQLSettingsStore(SettingsStore):
    """Settings persisted in the SQLite ``settings`` table."""

    def __init__(self, database: SettingsDatabase) -> None:
        self.database = database

    def get(self, key: str) -> str | None:
        with self.database.session() as sess:
            row = sess.get(SettingRecord, key)
            return row.value if row else None

    def set(self, key: str, value: str) -> None:
        with self.database.session() as sess:
            row = sess.get(SettingRecord, key)
            if not row:
                sess.add(SettingRecord(key=key, value=value))
            else:
                row.value = value

    def delete(self, key: str) -> None:
        with self.database.session() as sess:
            row = sess.get(SettingRecord, key)
            if row:
                sess.delete(row)
