# FILE: fixit/db.py
"""
Persistence handle for Fixit.

There is no module-level engine: main.py builds one Database at startup,
keeps it on app.state and disposes it at shutdown. Services receive the
handle (or a Session obtained from it) explicitly.

Database path defaults to ./data/fixit.db relative to the project root.
Override with FIXIT_DATABASE_URL.
"""

import logging
import os
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Engine + session factory with an explicit open/close lifecycle."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._sessionmaker: Optional[sessionmaker] = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    def open(self) -> "Database":
        """Create the engine and all tables. Safe to call twice."""
        if self._engine is not None:
            return self

        connect_args = {}
        if self.url.startswith("sqlite"):
            connect_args["check_same_thread"] = False  # Required for SQLite
            _ensure_sqlite_dir(self.url)

        self._engine = create_engine(self.url, connect_args=connect_args, echo=self.echo)
        self._sessionmaker = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)

        # Import models so Base.metadata knows about them
        from fixit.capabilities import models as _capability_models  # noqa: F401
        from fixit.audit import models as _audit_models  # noqa: F401
        from fixit.connections import models as _connection_models  # noqa: F401

        Base.metadata.create_all(bind=self._engine)
        logger.info("[db] opened %s", self.url)
        return self

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        logger.info("[db] closed %s", self.url)

    def new_session(self) -> Session:
        if self._sessionmaker is None:
            raise RuntimeError("Database is not open")
        return self._sessionmaker()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session scope: rolls back on error, always closes."""
        db = self.new_session()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


def _ensure_sqlite_dir(url: str) -> None:
    # sqlite:///./data/fixit.db -> ./data
    path = url.split("///", 1)[-1] if "///" in url else ""
    if not path or path == ":memory:":
        return
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the handle opened at startup."""
    return request.app.state.database


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency that yields a DB session and closes it after the request."""
    db = get_database(request).new_session()
    try:
        yield db
    finally:
        db.close()
