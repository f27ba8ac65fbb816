"""Caller identities supplied by the session layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Role(StrEnum):
    """Role carried by a session."""

    ADMIN = "admin"
    COURSE = "course"
    NONE = "none"


@dataclass(frozen=True)
class AdminIdentity:
    """The administrator."""

    @property
    def role(self) -> Role:
        return Role.ADMIN


@dataclass(frozen=True)
class CourseLeaderIdentity:
    """A course leader assigned to exactly one course.

    Attributes:
        course: Course name as chosen at login. Compared verbatim.
    """

    course: str

    @property
    def role(self) -> Role:
        return Role.COURSE


@dataclass(frozen=True)
class AnonymousIdentity:
    """A caller without a session."""

    @property
    def role(self) -> Role:
        return Role.NONE


Identity = AdminIdentity | CourseLeaderIdentity | AnonymousIdentity

ANONYMOUS = AnonymousIdentity()
ADMIN = AdminIdentity()
