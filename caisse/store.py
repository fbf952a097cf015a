# caisse/store.py
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .db import MEMORY_URL, create_tables, drop_tables, make_engine, make_session_factory, sqlite_url
from .errors import LockFailure, QueryFailure
from .seed import create_default_data, load_seed

logger = logging.getLogger(__name__)

DB_FILENAME = "pos.db"


def describe_db_error(exc: SQLAlchemyError) -> str:
    # prefer the driver message ("FOREIGN KEY constraint failed") over SQLAlchemy's wrapper
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class Store:
    """
    Handle on the local POS database.

    Every operation goes through `session()`, which holds the store lock for its
    whole duration and runs inside a single transaction: commit on success,
    rollback on any error.
    """

    def __init__(self, url: str, seed_locale: str = "fr") -> None:
        self.url = url
        self.seed_locale = seed_locale
        self.engine = make_engine(url)
        self._sessions = make_session_factory(self.engine)
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    def open(cls, db_path: str | Path, seed_locale: str = "fr") -> "Store":
        path = Path(db_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise QueryFailure(f"Failed to create data dir {path.parent}: {e}") from e

        store = cls(sqlite_url(path), seed_locale=seed_locale)
        store.initialize()
        logger.info("Opened POS database at %s", path)
        return store

    @classmethod
    def in_memory(cls, seed_locale: str = "fr") -> "Store":
        store = cls(MEMORY_URL, seed_locale=seed_locale)
        store.initialize()
        return store

    @property
    def closed(self) -> bool:
        return self._closed

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._lock:
            if self._closed:
                raise LockFailure("DB lock error: store is closed")
            yield

    def initialize(self) -> None:
        """Create missing tables and insert the default catalog."""
        with self._locked():
            self._build("Failed to create tables")

    def _check_seed(self) -> None:
        try:
            load_seed(self.seed_locale)
        except (FileNotFoundError, ValueError) as e:
            raise QueryFailure(f"Seed error: {e}") from e

    def _build(self, action: str) -> None:
        try:
            create_tables(self.engine)
            with self._sessions.begin() as session:
                create_default_data(session, self.seed_locale)
        except SQLAlchemyError as e:
            raise QueryFailure(f"{action}: {describe_db_error(e)}") from e
        except (FileNotFoundError, ValueError) as e:
            raise QueryFailure(f"Seed error: {e}") from e

    @contextmanager
    def session(self, action: str = "Query") -> Iterator[Session]:
        with self._locked():
            session = self._sessions()
            try:
                with session.begin():
                    yield session
            except SQLAlchemyError as e:
                raise QueryFailure(f"{action} error: {describe_db_error(e)}") from e
            except OverflowError as e:
                # sqlite3 rejects ints outside INTEGER's 64-bit range before SQLAlchemy sees them
                raise QueryFailure(f"{action} error: {e}") from e
            finally:
                session.close()

    def reset(self) -> None:
        """Drop every table, recreate the schema and reseed the default catalog."""
        with self._locked():
            # fail before dropping anything if the fixtures cannot be loaded
            self._check_seed()
            try:
                drop_tables(self.engine)
            except SQLAlchemyError as e:
                raise QueryFailure(f"Drop tables error: {describe_db_error(e)}") from e
            self._build("Failed to recreate tables")
        logger.info("Database reset (seed locale=%s)", self.seed_locale)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self.engine.dispose()
