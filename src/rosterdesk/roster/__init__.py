"""Roster - Validation, merging and course rules for student records."""

from rosterdesk.roster.catalog import (
    MAX_COURSES,
    assert_course_limit,
    derive_courses,
    sorted_courses,
    students_in_course,
)
from rosterdesk.roster.exceptions import (
    CourseLimitExceededError,
    RosterError,
    StudentNotFoundError,
    ValidationError,
)
from rosterdesk.roster.payloads import StudentCreate, StudentUpdate, parse_create, parse_update
from rosterdesk.roster.resolver import build_student, normalize_slots, resolve
from rosterdesk.roster.service import RosterService

__all__ = [
    "MAX_COURSES",
    "CourseLimitExceededError",
    "RosterError",
    "RosterService",
    "StudentCreate",
    "StudentNotFoundError",
    "StudentUpdate",
    "ValidationError",
    "assert_course_limit",
    "build_student",
    "derive_courses",
    "normalize_slots",
    "parse_create",
    "parse_update",
    "resolve",
    "sorted_courses",
    "students_in_course",
]
