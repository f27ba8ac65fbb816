"""Builds new student records from validated payloads.

Creation fills every field, defaulting omitted optional strings to empty.
Updates merge field by field: only fields that are both present in the
payload and editable for the caller are taken from the payload, everything
else comes from the existing record.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from rosterdesk.roster.exceptions import ValidationError
from rosterdesk.roster_store import SLOT_COUNT, Student, StudentField
from rosterdesk.roster_store.models import generate_uuid

if TYPE_CHECKING:
    from collections.abc import Set

    from rosterdesk.roster.payloads import StudentCreate, StudentUpdate


def normalize_slots(values: Sequence[str] | None, field: str = "courses") -> tuple[str, ...]:
    """Truncate or pad ``values`` to exactly SLOT_COUNT strings.

    Raises:
        ValidationError: If ``values`` is not a sequence of strings.
    """
    if values is None:
        return ("",) * SLOT_COUNT
    if isinstance(values, str | bytes) or not isinstance(values, Sequence):
        raise ValidationError(field, "expected a list of strings")
    slots = list(values[:SLOT_COUNT])
    if not all(isinstance(v, str) for v in slots):
        raise ValidationError(field, "expected a list of strings")
    slots.extend([""] * (SLOT_COUNT - len(slots)))
    return tuple(slots)


def build_student(payload: StudentCreate, student_id: str | None = None) -> Student:
    """Create a new record from a creation payload."""
    return Student(
        id=student_id if student_id is not None else generate_uuid(),
        first_name=payload.first_name,
        last_name=payload.last_name,
        gender=payload.gender,
        birth_date=payload.birth_date,
        school=payload.school,
        desired_course=payload.desired_course,
        courses=normalize_slots(payload.courses, "courses"),
        attendance=normalize_slots(payload.attendance, "attendance"),
        av=payload.av or "",
        sv=payload.sv or "",
    )


def _merge_attendance(
    existing: tuple[str, ...],
    proposed: tuple[str, ...],
    slots: Set[int] | None,
) -> tuple[str, ...]:
    if slots is None:
        return proposed
    return tuple(proposed[i] if i in slots else existing[i] for i in range(SLOT_COUNT))


def resolve(
    existing: Student,
    proposed: StudentUpdate,
    editable_fields: Set[StudentField],
    attendance_slots: Set[int] | None = None,
) -> Student:
    """Overlay the editable, present fields of ``proposed`` onto ``existing``.

    Args:
        existing: Record as currently stored.
        proposed: Validated partial update.
        editable_fields: Fields the caller may change.
        attendance_slots: Attendance indices the caller may change. None means all.

    Returns:
        The merged record. ``existing`` itself when nothing changes.
    """
    changes: dict[str, Any] = {}
    for field in proposed.requested_fields() & editable_fields:
        if field is StudentField.ID:
            continue
        value = getattr(proposed, field.value)
        if field is StudentField.COURSES:
            value = normalize_slots(value, "courses")
        elif field is StudentField.ATTENDANCE:
            value = _merge_attendance(
                existing.attendance,
                normalize_slots(value, "attendance"),
                attendance_slots,
            )
        changes[field.value] = value

    if not changes:
        return existing
    return replace(existing, **changes)
