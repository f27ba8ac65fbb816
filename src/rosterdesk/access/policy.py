"""Field-level authorization for roster operations.

All role decisions live here. Callers pass the identity, the target record
and the fields a payload wants to change, and get back either the subset of
fields they may write or the reason the request is refused.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from rosterdesk.access.exceptions import (
    AuthorizationError,
    InsufficientRoleError,
    NotAuthenticatedError,
    NotParticipantError,
    UnassignedError,
)
from rosterdesk.access.identity import (
    AdminIdentity,
    AnonymousIdentity,
    CourseLeaderIdentity,
    Identity,
)
from rosterdesk.config import AttendanceScope
from rosterdesk.roster_store import Student, StudentField

COURSE_LEADER_FIELDS = frozenset({StudentField.ATTENDANCE, StudentField.AV, StudentField.SV})


class ForbiddenReason(StrEnum):
    """Why a request was refused."""

    NOT_AUTHENTICATED = "not_authenticated"
    NOT_PARTICIPANT = "not_participant"
    INSUFFICIENT_ROLE = "insufficient_role"
    UNASSIGNED = "unassigned"


_REASON_ERRORS: dict[ForbiddenReason, type[AuthorizationError]] = {
    ForbiddenReason.NOT_AUTHENTICATED: NotAuthenticatedError,
    ForbiddenReason.NOT_PARTICIPANT: NotParticipantError,
    ForbiddenReason.INSUFFICIENT_ROLE: InsufficientRoleError,
    ForbiddenReason.UNASSIGNED: UnassignedError,
}


@dataclass(frozen=True)
class Allowed:
    """Request may proceed, restricted to ``editable_fields``."""

    editable_fields: frozenset[StudentField]


@dataclass(frozen=True)
class Forbidden:
    """Request is refused."""

    reason: ForbiddenReason
    detail: str = ""

    def to_error(self) -> AuthorizationError:
        """Build the exception matching the refusal reason."""
        return _REASON_ERRORS[self.reason](self.detail or self.reason.value)


Decision = Allowed | Forbidden


def _is_assigned(identity: CourseLeaderIdentity) -> bool:
    return bool(identity.course.strip())


def authorize(
    identity: Identity,
    target: Student,
    requested_fields: Iterable[StudentField],
) -> Decision:
    """Decide which of ``requested_fields`` the caller may change on ``target``.

    An empty ``requested_fields`` asks whether the caller may see the record.
    """
    requested = frozenset(requested_fields)

    match identity:
        case AnonymousIdentity():
            return Forbidden(ForbiddenReason.NOT_AUTHENTICATED)
        case AdminIdentity():
            return Allowed(requested - {StudentField.ID})
        case CourseLeaderIdentity() if not _is_assigned(identity):
            return Forbidden(ForbiddenReason.UNASSIGNED, "Session has no course assigned")
        case CourseLeaderIdentity(course=course):
            foreign = requested - COURSE_LEADER_FIELDS
            if foreign:
                names = ", ".join(sorted(f.value for f in foreign))
                return Forbidden(
                    ForbiddenReason.INSUFFICIENT_ROLE,
                    f"Course leaders may not change: {names}",
                )
            if not target.lists_course(course):
                return Forbidden(ForbiddenReason.NOT_PARTICIPANT)
            return Allowed(requested)
        case _:
            return Forbidden(ForbiddenReason.UNASSIGNED, f"Unknown identity: {identity!r}")


def authorize_admin(identity: Identity) -> Decision:
    """Decide whether the caller may run an admin-only operation (create, delete)."""
    match identity:
        case AdminIdentity():
            return Allowed(frozenset(StudentField) - {StudentField.ID})
        case AnonymousIdentity():
            return Forbidden(ForbiddenReason.NOT_AUTHENTICATED)
        case CourseLeaderIdentity():
            return Forbidden(ForbiddenReason.INSUFFICIENT_ROLE, "Administrator role required")
        case _:
            return Forbidden(ForbiddenReason.UNASSIGNED, f"Unknown identity: {identity!r}")


def authorize_course_view(identity: Identity, course: str) -> Decision:
    """Decide whether the caller may open the dashboard of ``course``.

    Dashboard lookups compare course names trimmed and case-insensitively.
    """
    match identity:
        case AdminIdentity():
            return Allowed(frozenset())
        case AnonymousIdentity():
            return Forbidden(ForbiddenReason.NOT_AUTHENTICATED)
        case CourseLeaderIdentity() if not _is_assigned(identity):
            return Forbidden(ForbiddenReason.UNASSIGNED, "Session has no course assigned")
        case CourseLeaderIdentity(course=assigned):
            if assigned.strip().casefold() != course.strip().casefold():
                return Forbidden(ForbiddenReason.NOT_PARTICIPANT)
            return Allowed(frozenset())
        case _:
            return Forbidden(ForbiddenReason.UNASSIGNED, f"Unknown identity: {identity!r}")


def editable_attendance_slots(
    identity: Identity,
    target: Student,
    scope: AttendanceScope,
) -> frozenset[int] | None:
    """Attendance slot indices the caller may overwrite, or None for all slots.

    With ``AttendanceScope.SLOT`` a course leader reaches the slots holding
    their own course plus unused slots; markers of other courses stay put.
    A student who only desires the leader's course has no slot of it, so the
    leader gets the whole vector there.
    """
    match identity:
        case CourseLeaderIdentity(course=course) if course not in target.courses:
            return None
        case CourseLeaderIdentity(course=course) if scope is AttendanceScope.SLOT:
            return frozenset(
                index
                for index, name in enumerate(target.courses)
                if name == course or not name.strip()
            )
        case _:
            return None
