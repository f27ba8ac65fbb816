"""SQLite engine and session handling for the roster database."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from rosterdesk.roster_store.models import Base

if TYPE_CHECKING:
    from sqlalchemy import Connection, Engine

MEMORY = ":memory:"


def _configure_connection(dbapi_connection: object, _connection_record: object) -> None:
    # Autocommit at the driver level; _begin_immediate opens every transaction
    dbapi_connection.isolation_level = None  # type: ignore[attr-defined]
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    try:
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def _begin_immediate(conn: Connection) -> None:
    conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    """Owns the SQLAlchemy engine of one roster database.

    Connections run in WAL mode so readers are not blocked by a writer.
    Transactions open with ``BEGIN IMMEDIATE``: the file write lock is taken
    up front, and a second process waits up to ``busy_timeout`` seconds for it.
    """

    def __init__(self, db_path: str = MEMORY, busy_timeout: float = 5.0) -> None:
        """Prepare the database; the engine is created on first use.

        Args:
            db_path: SQLite file, or ":memory:" for a private in-memory database.
            busy_timeout: Seconds to wait for a lock held by another connection.
        """
        self.db_path = db_path
        self.busy_timeout = busy_timeout
        self._engine: Engine | None = None
        self._sessions: sessionmaker[Session] | None = None

    @property
    def in_memory(self) -> bool:
        return self.db_path == MEMORY

    @property
    def engine(self) -> Engine:
        """The engine, built lazily."""
        if self._engine is None:
            self._engine = self._build_engine()
        return self._engine

    def _build_engine(self) -> Engine:
        connect_args: dict[str, object] = {"timeout": self.busy_timeout}
        if self.in_memory:
            # One shared connection; RosterRepository serializes sessions on it
            connect_args["check_same_thread"] = False
            engine = create_engine("sqlite://", poolclass=StaticPool, connect_args=connect_args)
        else:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(f"sqlite:///{self.db_path}", connect_args=connect_args)

        event.listen(engine, "connect", _configure_connection)
        event.listen(engine, "begin", _begin_immediate)
        return engine

    def create_schema(self) -> None:
        """Create the roster tables that are missing."""
        Base.metadata.create_all(self.engine)

    def drop_schema(self) -> None:
        """Drop the roster tables and everything in them."""
        Base.metadata.drop_all(self.engine)

    def get_session(self) -> Session:
        """Open a session. Loaded objects stay usable after commit."""
        if self._sessions is None:
            self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._sessions()

    def set_aside(self) -> Path:
        """Rename the database file out of the way and return its new path.

        The engine is disposed first. WAL and shared-memory sidecar files move
        along with the database so nothing of the old file is reused.
        """
        self.close()
        stamp = datetime.now(UTC).strftime("%Y%m%d%H%M%S")
        source = Path(self.db_path)
        target = source.with_name(f"{source.name}.corrupt-{stamp}")
        source.rename(target)
        for suffix in ("-wal", "-shm"):
            sidecar = source.with_name(source.name + suffix)
            if sidecar.exists():
                sidecar.rename(target.with_name(target.name + suffix))
        return target

    def journal_mode(self) -> str:
        """Journal mode SQLite reports for this database ("wal" for files)."""
        with self.engine.connect() as conn:
            return str(conn.execute(text("PRAGMA journal_mode")).scalar())

    def close(self) -> None:
        """Dispose of the engine; the next access builds a new one."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._sessions = None
