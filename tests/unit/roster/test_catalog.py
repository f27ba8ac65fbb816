"""Unit tests for the course catalog."""

import pytest

from rosterdesk.roster import (
    MAX_COURSES,
    CourseLimitExceededError,
    assert_course_limit,
    derive_courses,
    sorted_courses,
    students_in_course,
)


@pytest.mark.unit
class TestDeriveCourses:
    """Tests for derive_courses."""

    def test_union_of_slots_and_desired(self, make_student) -> None:
        """Enrolled and desired courses both count, once each."""
        students = [
            make_student("a", courses=("Math", "Art"), desired_course="Biology"),
            make_student("b", courses=("Math",), desired_course="Math"),
        ]

        assert derive_courses(students) == {"Math", "Art", "Biology"}

    def test_trims_and_skips_blanks(self, make_student) -> None:
        """Padding is ignored and empty names are not courses."""
        students = [make_student("a", courses=(" Math ", "  ", ""), desired_course=" ")]

        assert derive_courses(students) == {"Math"}

    def test_case_variants_are_distinct(self, make_student) -> None:
        """'Math' and 'math' are two catalog entries."""
        students = [make_student("a", courses=("Math", "math"))]

        assert len(derive_courses(students)) == 2

    def test_empty_roster(self) -> None:
        """No students, no courses."""
        assert derive_courses([]) == frozenset()


@pytest.mark.unit
class TestSortedCourses:
    """Tests for sorted_courses."""

    def test_case_insensitive(self) -> None:
        """Lowercase names sort among uppercase ones."""
        assert sorted_courses(["biology", "Art", "Chemie"]) == ["Art", "biology", "Chemie"]

    def test_accents_sort_with_base_letter(self) -> None:
        """Accented letters sort next to their base letter."""
        assert sorted_courses(["Zeichnen", "Ökologie", "Musik"]) == [
            "Musik",
            "Ökologie",
            "Zeichnen",
        ]

    def test_ties_are_deterministic(self) -> None:
        """Names equal under folding keep a stable order."""
        assert sorted_courses(["math", "Math"]) == ["Math", "math"]


@pytest.mark.unit
class TestAssertCourseLimit:
    """Tests for assert_course_limit."""

    def test_at_limit_passes(self) -> None:
        """Twelve courses are allowed."""
        assert_course_limit([f"C{i}" for i in range(MAX_COURSES)])

    def test_over_limit_raises(self) -> None:
        """Thirteen courses are rejected with both counts."""
        with pytest.raises(CourseLimitExceededError) as exc_info:
            assert_course_limit([f"C{i}" for i in range(13)])

        assert exc_info.value.attempted == 13
        assert exc_info.value.allowed == 12

    def test_custom_limit(self) -> None:
        """The limit is a parameter."""
        with pytest.raises(CourseLimitExceededError):
            assert_course_limit(["A", "B"], limit=1)


@pytest.mark.unit
class TestStudentsInCourse:
    """Tests for students_in_course."""

    def test_case_insensitive_lookup(self, make_student) -> None:
        """Dashboard lookup ignores case and padding."""
        students = [
            make_student("a", courses=("Math",)),
            make_student("b", desired_course=" MATH "),
            make_student("c", courses=("Art",)),
        ]

        assert [s.id for s in students_in_course(students, "math")] == ["a", "b"]

    def test_blank_course_matches_nobody(self, make_student) -> None:
        """Empty slots are not a course."""
        assert students_in_course([make_student("a")], " ") == []
