"""Custom exceptions for roster operations."""

from rosterdesk.exceptions import RosterDeskError


class RosterError(RosterDeskError):
    """Base exception for roster operation errors."""


class ValidationError(RosterError):
    """Payload is malformed or misses a required field."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Invalid field '{field}': {reason}")
        self.field = field
        self.reason = reason


class StudentNotFoundError(RosterError):
    """Student with given ID does not exist."""


class CourseLimitExceededError(RosterError):
    """Operation would push the course catalog past its limit."""

    def __init__(self, attempted: int, allowed: int) -> None:
        super().__init__(f"Roster would reference {attempted} courses, at most {allowed} allowed")
        self.attempted = attempted
        self.allowed = allowed
