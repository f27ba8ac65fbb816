"""Access - Caller identities and the roster authorization policy."""

from rosterdesk.access.exceptions import (
    AuthorizationError,
    InsufficientRoleError,
    NotAuthenticatedError,
    NotParticipantError,
    UnassignedError,
)
from rosterdesk.access.identity import (
    ADMIN,
    ANONYMOUS,
    AdminIdentity,
    AnonymousIdentity,
    CourseLeaderIdentity,
    Identity,
    Role,
)
from rosterdesk.access.policy import (
    COURSE_LEADER_FIELDS,
    Allowed,
    Decision,
    Forbidden,
    ForbiddenReason,
    authorize,
    authorize_admin,
    authorize_course_view,
    editable_attendance_slots,
)

__all__ = [
    "ADMIN",
    "ANONYMOUS",
    "COURSE_LEADER_FIELDS",
    "AdminIdentity",
    "Allowed",
    "AnonymousIdentity",
    "AuthorizationError",
    "CourseLeaderIdentity",
    "Decision",
    "Forbidden",
    "ForbiddenReason",
    "Identity",
    "InsufficientRoleError",
    "NotAuthenticatedError",
    "NotParticipantError",
    "Role",
    "UnassignedError",
    "authorize",
    "authorize_admin",
    "authorize_course_view",
    "editable_attendance_slots",
]
