"""RosterRepository - whole-roster persistence for student records."""

from __future__ import annotations

import json
import logging
import threading
from collections import Counter
from contextlib import contextmanager, nullcontext
from typing import TYPE_CHECKING

from sqlalchemy import delete, select
from sqlalchemy.exc import DatabaseError, OperationalError, SQLAlchemyError

from rosterdesk.roster_store.database import Database
from rosterdesk.roster_store.exceptions import (
    DuplicateStudentIdError,
    RosterConflictError,
    StorageUnavailableError,
)
from rosterdesk.roster_store.models import (
    SLOT_COUNT,
    RosterMeta,
    RosterSnapshot,
    Student,
    StudentRow,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

META_ID = 1


def _is_not_a_database(error: SQLAlchemyError) -> bool:
    return isinstance(error, DatabaseError) and "file is not a database" in str(error)


def _encode_slots(values: Sequence[str]) -> str:
    return json.dumps(list(values), ensure_ascii=False)


def _decode_slots(raw: str | None, student_id: str, column: str) -> tuple[str, ...]:
    """Decode a stored slot vector, repairing malformed values.

    Anything that is not a JSON list becomes an empty vector; non-string
    elements are stringified and the result is padded/truncated to SLOT_COUNT.
    """
    try:
        values = json.loads(raw) if raw else []
    except ValueError:
        logger.warning("Student %s has unreadable %s, resetting slots", student_id, column)
        values = []
    if not isinstance(values, list):
        logger.warning("Student %s has non-list %s, resetting slots", student_id, column)
        values = []
    slots = ["" if v is None else str(v) for v in values[:SLOT_COUNT]]
    slots.extend([""] * (SLOT_COUNT - len(slots)))
    return tuple(slots)


def _row_to_student(row: StudentRow) -> Student:
    return Student(
        id=row.id,
        first_name=row.first_name or "",
        last_name=row.last_name or "",
        gender=row.gender or "",
        birth_date=row.birth_date or "",
        school=row.school or "",
        desired_course=row.desired_course or "",
        courses=_decode_slots(row.courses, row.id, "courses"),
        attendance=_decode_slots(row.attendance, row.id, "attendance"),
        av=row.av or "",
        sv=row.sv or "",
    )


def _student_to_row(student: Student, position: int) -> StudentRow:
    return StudentRow(
        id=student.id,
        position=position,
        first_name=student.first_name,
        last_name=student.last_name,
        gender=student.gender,
        birth_date=student.birth_date,
        school=student.school,
        desired_course=student.desired_course,
        courses=_encode_slots(student.courses),
        attendance=_encode_slots(student.attendance),
        av=student.av,
        sv=student.sv,
    )


class RosterRepository:
    """Durable store for the full student roster.

    The roster is always read and written as a whole. Writes replace every
    row inside one SQLite transaction and bump a version token, so readers
    never see a partially written roster and a stale writer can be detected.
    """

    def __init__(self, db_path: str = "rosterdesk.db", busy_timeout: float = 5.0) -> None:
        """Initialize the repository, creating the schema on first run.

        A file that is not a SQLite database is renamed aside and replaced by
        an empty roster.

        Args:
            db_path: Path to SQLite database file, or ":memory:".
            busy_timeout: Seconds to wait for another writer's lock.

        Raises:
            StorageUnavailableError: If the database cannot be opened.
        """
        self._db = Database(db_path, busy_timeout=busy_timeout)
        self._writer_lock = threading.RLock()
        try:
            try:
                self._db.create_schema()
            except SQLAlchemyError as e:
                if self._db.in_memory or not _is_not_a_database(e):
                    raise
                moved = self._db.set_aside()
                logger.error("Roster database %s is corrupt, moved to %s", db_path, moved)
                self._db.create_schema()
        except (SQLAlchemyError, OSError) as e:
            logger.exception("Cannot open roster database at %s", db_path)
            raise StorageUnavailableError(f"Roster database '{db_path}' is unavailable") from e

    @property
    def database(self) -> Database:
        """The underlying database connection manager."""
        return self._db

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        # An in-memory store shares one connection, so sessions must not overlap
        guard = self._writer_lock if self._db.in_memory else nullcontext()
        with guard:
            session = self._db.get_session()
            try:
                yield session
            finally:
                session.close()

    @contextmanager
    def writer(self) -> Iterator[None]:
        """Hold the in-process writer guard for a read-validate-write sequence."""
        with self._writer_lock:
            yield

    def read_all(self) -> list[Student]:
        """Return every student in insertion order as a fresh snapshot.

        Raises:
            StorageUnavailableError: If the backing store cannot be read.
        """
        return list(self.read_snapshot().students)

    def read_snapshot(self) -> RosterSnapshot:
        """Return every student together with the current version token.

        A missing schema is recreated and reported as an empty roster.

        Raises:
            StorageUnavailableError: If the backing store cannot be read.
        """
        with self._session() as session:
            try:
                rows = session.execute(select(StudentRow).order_by(StudentRow.position)).scalars()
                students = tuple(_row_to_student(row) for row in rows)
                meta = session.get(RosterMeta, META_ID)
                return RosterSnapshot(students=students, version=meta.version if meta else 0)
            except OperationalError as e:
                if "no such table" not in str(e):
                    logger.exception("Failed to read roster")
                    raise StorageUnavailableError("Roster could not be read") from e
                session.rollback()
                logger.warning("Roster schema missing, starting with an empty roster")
                self._recreate_schema()
                return RosterSnapshot(students=(), version=0)
            except SQLAlchemyError as e:
                logger.exception("Failed to read roster")
                raise StorageUnavailableError("Roster could not be read") from e

    def write_all(
        self,
        students: Sequence[Student],
        expected_version: int | None = None,
    ) -> int:
        """Atomically replace the persisted roster.

        Args:
            students: The complete new roster, in the order to persist.
            expected_version: Version the caller's snapshot was read at. When
                given, the write is refused if the roster changed since.

        Returns:
            The new roster version.

        Raises:
            DuplicateStudentIdError: If two records share an id.
            RosterConflictError: If ``expected_version`` is stale.
            StorageUnavailableError: If the write fails. The prior roster is kept.
        """
        records = list(students)
        duplicates = [sid for sid, count in Counter(s.id for s in records).items() if count > 1]
        if duplicates:
            raise DuplicateStudentIdError(f"Duplicate student ids: {', '.join(duplicates)}")

        with self._session() as session:
            try:
                meta = session.get(RosterMeta, META_ID)
                current = meta.version if meta else 0
                if expected_version is not None and expected_version != current:
                    raise RosterConflictError(expected_version, current)

                session.execute(delete(StudentRow))
                session.add_all(_student_to_row(s, pos) for pos, s in enumerate(records))
                if meta is None:
                    meta = RosterMeta(id=META_ID, version=0)
                    session.add(meta)
                meta.version = current + 1
                session.commit()
                logger.debug(
                    "Roster written: %d students, version %d", len(records), meta.version
                )
                return meta.version
            except SQLAlchemyError as e:
                session.rollback()
                logger.exception("Failed to write roster")
                raise StorageUnavailableError("Roster could not be written") from e

    def _recreate_schema(self) -> None:
        try:
            self._db.create_schema()
        except SQLAlchemyError as e:
            logger.exception("Failed to recreate roster schema")
            raise StorageUnavailableError("Roster could not be read") from e
