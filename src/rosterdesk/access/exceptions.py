"""Authorization failures raised for denied roster operations."""

from rosterdesk.exceptions import RosterDeskError


class AuthorizationError(RosterDeskError):
    """Base exception for denied operations."""


class NotAuthenticatedError(AuthorizationError):
    """Caller has no session."""


class InsufficientRoleError(AuthorizationError):
    """Caller's role may not perform the operation or touch the requested fields."""


class NotParticipantError(AuthorizationError):
    """Target student does not participate in the course leader's course."""


class UnassignedError(AuthorizationError):
    """Session carries no usable role or course assignment."""
