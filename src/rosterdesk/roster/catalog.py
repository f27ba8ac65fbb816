"""Course catalog derived from the roster.

The catalog has no storage of its own: it is recomputed from a roster
snapshot whenever it is needed.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Iterable

from rosterdesk.roster.exceptions import CourseLimitExceededError
from rosterdesk.roster_store import Student

MAX_COURSES = 12


def derive_courses(students: Iterable[Student]) -> frozenset[str]:
    """Distinct, trimmed, non-empty course names referenced by ``students``.

    Both enrolled course slots and desired courses count.
    """
    courses: set[str] = set()
    for student in students:
        for name in (*student.courses, student.desired_course):
            trimmed = name.strip()
            if trimmed:
                courses.add(trimmed)
    return frozenset(courses)


def _display_key(name: str) -> tuple[str, str]:
    decomposed = unicodedata.normalize("NFKD", name)
    folded = "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()
    return folded, name


def sorted_courses(courses: Iterable[str]) -> list[str]:
    """Order course names for display (accent- and case-insensitive)."""
    return sorted(courses, key=_display_key)


def assert_course_limit(courses: Iterable[str], limit: int = MAX_COURSES) -> None:
    """Reject a catalog with more than ``limit`` distinct courses.

    Raises:
        CourseLimitExceededError: With the attempted and allowed counts.
    """
    count = len(set(courses))
    if count > limit:
        raise CourseLimitExceededError(attempted=count, allowed=limit)


def _normalise(name: str) -> str:
    return name.strip().casefold()


def students_in_course(students: Iterable[Student], course: str) -> list[Student]:
    """Students desiring or enrolled in ``course``, ignoring case and padding."""
    wanted = _normalise(course)
    if not wanted:
        return []
    return [
        s
        for s in students
        if _normalise(s.desired_course) == wanted
        or any(_normalise(c) == wanted for c in s.courses)
    ]
