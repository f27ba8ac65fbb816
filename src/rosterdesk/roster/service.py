"""RosterService - Role-scoped operations on the student roster."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rosterdesk.access import (
    AdminIdentity,
    Allowed,
    AnonymousIdentity,
    CourseLeaderIdentity,
    Forbidden,
    NotAuthenticatedError,
    authorize,
    authorize_admin,
    authorize_course_view,
    editable_attendance_slots,
)
from rosterdesk.config import AttendanceScope
from rosterdesk.roster.catalog import (
    MAX_COURSES,
    assert_course_limit,
    derive_courses,
    sorted_courses,
    students_in_course,
)
from rosterdesk.roster.exceptions import StudentNotFoundError, ValidationError
from rosterdesk.roster.payloads import fields_in, parse_create, parse_update
from rosterdesk.roster.resolver import build_student, resolve

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rosterdesk.access import Decision, Identity
    from rosterdesk.roster_store import RosterRepository, RosterSnapshot, Student

logger = logging.getLogger(__name__)


class RosterService:
    """Applies the authorization policy and course limit to roster changes.

    Every mutation runs read-validate-write under the repository's writer
    guard and commits against the version it validated, so all checks happen
    before anything is written and a concurrent change is never overwritten.
    """

    def __init__(
        self,
        repository: RosterRepository,
        attendance_scope: AttendanceScope = AttendanceScope.SLOT,
        course_limit: int = MAX_COURSES,
    ) -> None:
        """Initialize the service.

        Args:
            repository: Store holding the roster.
            attendance_scope: Attendance slots a course leader may write.
            course_limit: Maximum number of distinct courses in the roster.
        """
        self.repository = repository
        self.attendance_scope = attendance_scope
        self.course_limit = course_limit

    # --- Queries ---

    def list_courses(self) -> list[str]:
        """Return the course catalog in display order."""
        return sorted_courses(derive_courses(self.repository.read_all()))

    def list_students(self, identity: Identity) -> list[Student]:
        """List the students visible to the caller.

        Admins see the whole roster, course leaders the students of their
        own course.

        Raises:
            NotAuthenticatedError: If the caller has no session.
            UnassignedError: If a course leader session has no course.
        """
        self._require_session(identity)
        if isinstance(identity, CourseLeaderIdentity):
            return self.course_students(identity, identity.course)
        return self.repository.read_all()

    def get_student(self, identity: Identity, student_id: str) -> Student:
        """Get one student by ID.

        Raises:
            NotAuthenticatedError: If the caller has no session.
            StudentNotFoundError: If the student doesn't exist.
            NotParticipantError: If a course leader asks for a foreign student.
        """
        self._require_session(identity)
        snapshot = self.repository.read_snapshot()
        index = self._find(snapshot, student_id)
        student = snapshot.students[index]
        self._require(authorize(identity, student, ()), "view", student_id, identity)
        return student

    def course_students(self, identity: Identity, course: str) -> list[Student]:
        """List students desiring or enrolled in ``course``.

        Raises:
            NotAuthenticatedError: If the caller has no session.
            NotParticipantError: If a course leader asks for another course.
        """
        self._require(authorize_course_view(identity, course), "view course", course, identity)
        return students_in_course(self.repository.read_all(), course)

    # --- Mutations ---

    def create_student(self, identity: Identity, data: Any) -> Student:
        """Create a student from a creation payload.

        Raises:
            NotAuthenticatedError: If the caller has no session.
            InsufficientRoleError: If the caller is not the admin.
            ValidationError: If the payload is invalid.
            CourseLimitExceededError: If the roster would exceed the course limit.
        """
        self._require(authorize_admin(identity), "create", "-", identity)
        payload = parse_create(data)

        with self.repository.writer():
            snapshot = self.repository.read_snapshot()
            student = build_student(payload)
            prospective = snapshot.with_students([student])
            assert_course_limit(derive_courses(prospective), self.course_limit)
            self.repository.write_all(prospective, expected_version=snapshot.version)

        logger.info("Student %s created by %s", student.id, identity.role)
        return student

    def update_student(self, identity: Identity, student_id: str, data: Any) -> Student:
        """Apply a partial update within the caller's permissions.

        Fields omitted from the payload keep their stored values.

        Raises:
            NotAuthenticatedError: If the caller has no session.
            StudentNotFoundError: If the student doesn't exist.
            InsufficientRoleError: If a course leader touches a master field.
            NotParticipantError: If a course leader targets a foreign student.
            ValidationError: If the payload is invalid.
            CourseLimitExceededError: If the roster would exceed the course limit.
        """
        self._require_session(identity)
        requested = fields_in(data)

        with self.repository.writer():
            snapshot = self.repository.read_snapshot()
            index = self._find(snapshot, student_id)
            existing = snapshot.students[index]

            decision = self._require(
                authorize(identity, existing, requested), "update", student_id, identity
            )
            payload = parse_update(data)
            updated = resolve(
                existing,
                payload,
                decision.editable_fields,
                editable_attendance_slots(identity, existing, self.attendance_scope),
            )

            prospective = snapshot.replaced(index, updated)
            if isinstance(identity, AdminIdentity):
                assert_course_limit(derive_courses(prospective), self.course_limit)
            if updated != existing:
                self.repository.write_all(prospective, expected_version=snapshot.version)

        logger.info(
            "Student %s updated by %s (%s)",
            student_id,
            identity.role,
            ", ".join(sorted(f.value for f in decision.editable_fields)) or "no fields",
        )
        return updated

    def delete_student(self, identity: Identity, student_id: str) -> None:
        """Delete a student by ID.

        Raises:
            NotAuthenticatedError: If the caller has no session.
            InsufficientRoleError: If the caller is not the admin.
            StudentNotFoundError: If the student doesn't exist.
        """
        self._require(authorize_admin(identity), "delete", student_id, identity)

        with self.repository.writer():
            snapshot = self.repository.read_snapshot()
            self._find(snapshot, student_id)
            remaining = [s for s in snapshot.students if s.id != student_id]
            self.repository.write_all(remaining, expected_version=snapshot.version)

        logger.info("Student %s deleted by %s", student_id, identity.role)

    # --- Import / export ---

    def import_roster(self, path: str | Path) -> int:
        """Replace the roster with the records of a JSON export.

        Records keep their ``id`` when present, otherwise get a new one.

        Returns:
            Number of imported students.

        Raises:
            ValidationError: If the file or a record is malformed.
            DuplicateStudentIdError: If two records share an id.
            CourseLimitExceededError: If the records exceed the course limit.
        """
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except ValueError as e:
            raise ValidationError("file", f"not valid JSON: {e}") from e
        if not isinstance(raw, list):
            raise ValidationError("file", "expected a JSON list of students")

        students = self._build_import(raw)
        assert_course_limit(derive_courses(students), self.course_limit)

        with self.repository.writer():
            snapshot = self.repository.read_snapshot()
            self.repository.write_all(students, expected_version=snapshot.version)

        logger.info("Imported %d students from %s", len(students), path)
        return len(students)

    def export_roster(self, path: str | Path) -> int:
        """Write the roster to a JSON file.

        Returns:
            Number of exported students.
        """
        students = self.repository.read_all()
        Path(path).write_text(
            json.dumps([s.to_dict() for s in students], ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        logger.info("Exported %d students to %s", len(students), path)
        return len(students)

    # --- Helpers ---

    def _build_import(self, records: Sequence[Any]) -> list[Student]:
        students = []
        for position, record in enumerate(records):
            try:
                payload = parse_create(record)
            except ValidationError as e:
                raise ValidationError(f"[{position}].{e.field}", e.reason) from e
            student_id = record.get("id")
            students.append(build_student(payload, str(student_id) if student_id else None))
        return students

    def _find(self, snapshot: RosterSnapshot, student_id: str) -> int:
        index = snapshot.find(student_id)
        if index is None:
            raise StudentNotFoundError(f"Student with id '{student_id}' not found")
        return index

    def _require_session(self, identity: Identity) -> None:
        if isinstance(identity, AnonymousIdentity):
            logger.warning("Unauthenticated roster access refused")
            raise NotAuthenticatedError("not_authenticated")

    def _require(
        self, decision: Decision, action: str, target: str, identity: Identity
    ) -> Allowed:
        match decision:
            case Allowed():
                return decision
            case Forbidden(reason=reason):
                logger.warning(
                    "Refused %s on %s for %s: %s", action, target, identity.role, reason
                )
                raise decision.to_error()
