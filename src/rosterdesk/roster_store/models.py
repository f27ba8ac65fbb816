"""Student records and their SQLAlchemy persistence models."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Number of course slots (and aligned attendance slots) per student
SLOT_COUNT = 6


class StudentField(StrEnum):
    """Student attributes addressable by authorization and updates."""

    ID = "id"
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    GENDER = "gender"
    BIRTH_DATE = "birth_date"
    SCHOOL = "school"
    DESIRED_COURSE = "desired_course"
    COURSES = "courses"
    ATTENDANCE = "attendance"
    AV = "av"
    SV = "sv"


MASTER_FIELDS = frozenset(
    {
        StudentField.FIRST_NAME,
        StudentField.LAST_NAME,
        StudentField.GENDER,
        StudentField.BIRTH_DATE,
        StudentField.SCHOOL,
        StudentField.DESIRED_COURSE,
        StudentField.COURSES,
    }
)


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def empty_slots() -> tuple[str, ...]:
    """Return a fully unused slot vector."""
    return ("",) * SLOT_COUNT


@dataclass(frozen=True)
class Student:
    """A single student record.

    Instances are immutable snapshots; changes produce a new record via
    ``dataclasses.replace``.
    """

    id: str
    first_name: str
    last_name: str
    gender: str
    birth_date: str
    school: str
    desired_course: str = ""
    courses: tuple[str, ...] = field(default_factory=empty_slots)
    attendance: tuple[str, ...] = field(default_factory=empty_slots)
    av: str = ""
    sv: str = ""

    def lists_course(self, course: str) -> bool:
        """Whether the student desires or is enrolled in exactly ``course``."""
        return self.desired_course == course or course in self.courses

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase layout used on the wire and in exports."""
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "gender": self.gender,
            "birthDate": self.birth_date,
            "school": self.school,
            "desiredCourse": self.desired_course,
            "courses": list(self.courses),
            "attendance": list(self.attendance),
            "av": self.av,
            "sv": self.sv,
        }


@dataclass(frozen=True)
class RosterSnapshot:
    """Full roster as read at one point in time.

    Attributes:
        students: Every record, in insertion order.
        version: Roster version token the snapshot was read at.
    """

    students: tuple[Student, ...]
    version: int

    def find(self, student_id: str) -> int | None:
        """Return the index of ``student_id`` in the snapshot, if present."""
        for index, student in enumerate(self.students):
            if student.id == student_id:
                return index
        return None

    def replaced(self, index: int, student: Student) -> list[Student]:
        """Return the roster with the record at ``index`` swapped for ``student``."""
        students = list(self.students)
        students[index] = student
        return students

    def with_students(self, extra: Iterable[Student]) -> list[Student]:
        """Return the roster with ``extra`` appended."""
        return [*self.students, *extra]


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class StudentRow(Base):
    """Student table - one row per roster record."""

    __tablename__ = "students"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    gender: Mapped[str] = mapped_column(String(50), nullable=False)
    birth_date: Mapped[str] = mapped_column(String(50), nullable=False)
    school: Mapped[str] = mapped_column(String(255), nullable=False)
    desired_course: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    # JSON-encoded list of SLOT_COUNT strings
    courses: Mapped[str] = mapped_column(Text, nullable=False)
    attendance: Mapped[str] = mapped_column(Text, nullable=False)
    av: Mapped[str] = mapped_column(Text, nullable=False, default="")
    sv: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return (
            f"<StudentRow(id={self.id!r}, position={self.position!r}, "
            f"last_name={self.last_name!r})>"
        )


class RosterMeta(Base):
    """Single-row table holding the roster version token."""

    __tablename__ = "roster_meta"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<RosterMeta(version={self.version!r})>"
