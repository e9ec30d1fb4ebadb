"""SQLite database holding the settings table."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.errors import SettingsStoreError
from persistence.schemas import Base

logger = logging.getLogger("rar.settings")


class SettingsDatabase:
    """Owns the engine for one settings file; the schema exists once constructed.

    Database errors leave this class as ``SettingsStoreError``.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_engine(f"sqlite+pysqlite:///{self.db_path}", future=True)
        self._session_factory = sessionmaker(bind=self.engine, future=True)
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise SettingsStoreError(f"Cannot open settings database {self.db_path}: {exc}") from exc
        logger.debug("Settings database ready at %s", self.db_path)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Commit on success; roll back and translate database errors."""
        sess = self._session_factory()
        try:
            yield sess
            sess.commit()
        except SQLAlchemyError as exc:
            sess.rollback()
            raise SettingsStoreError(f"Settings database {self.db_path} failed: {exc}") from exc
        except Exception:
            sess.rollback()
            raise
        finally:
            sess.close()
