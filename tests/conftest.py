"""Shared pytest fixtures and configuration."""

import pytest

from rosterdesk.roster_store import Student


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def student_payload() -> dict:
    """A valid creation payload with only the required fields."""
    return {
        "firstName": "Mia",
        "lastName": "Becker",
        "gender": "w",
        "birthDate": "2011-04-02",
        "school": "Goethe-Gymnasium",
    }


def build_student_record(
    student_id: str,
    courses: tuple[str, ...] = (),
    desired_course: str = "",
    **kwargs: object,
) -> Student:
    """Build a Student with filler master fields."""
    fields = {
        "first_name": f"First {student_id}",
        "last_name": f"Last {student_id}",
        "gender": "m",
        "birth_date": "2010-01-01",
        "school": "Schule",
    }
    fields.update(kwargs)
    padded = tuple(courses) + ("",) * (6 - len(courses))
    return Student(id=student_id, courses=padded, desired_course=desired_course, **fields)


@pytest.fixture
def make_student():
    """Factory for Student records with filler master fields."""
    return build_student_record
