"""Pydantic models for student create/update payloads.

Wire names are camelCase (``firstName``); attribute names match
:class:`~rosterdesk.roster_store.StudentField` values so the set of fields a
payload carries maps directly onto the authorization policy.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic import ValidationError as PydanticValidationError

from rosterdesk.roster.exceptions import ValidationError
from rosterdesk.roster_store import StudentField

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
TrimmedText = Annotated[str, StringConstraints(strip_whitespace=True)]
Slots = list[str]


class StudentCreate(BaseModel):
    """Payload for creating a student."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    first_name: RequiredText = Field(alias="firstName")
    last_name: RequiredText = Field(alias="lastName")
    gender: RequiredText
    birth_date: RequiredText = Field(alias="birthDate")
    school: RequiredText
    desired_course: TrimmedText = Field(default="", alias="desiredCourse")
    courses: Slots | None = None
    attendance: Slots | None = None
    av: str | None = None
    sv: str | None = None


class StudentUpdate(BaseModel):
    """Payload for a partial update. Omitted or null fields stay unchanged."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    first_name: RequiredText | None = Field(default=None, alias="firstName")
    last_name: RequiredText | None = Field(default=None, alias="lastName")
    gender: RequiredText | None = None
    birth_date: RequiredText | None = Field(default=None, alias="birthDate")
    school: RequiredText | None = None
    desired_course: TrimmedText | None = Field(default=None, alias="desiredCourse")
    courses: Slots | None = None
    attendance: Slots | None = None
    av: str | None = None
    sv: str | None = None

    def requested_fields(self) -> frozenset[StudentField]:
        """Fields the payload actually carries a value for."""
        return frozenset(
            StudentField(name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        )


def _first_error(error: PydanticValidationError) -> ValidationError:
    issue = error.errors()[0]
    loc = issue.get("loc") or ()
    field = str(loc[0]) if loc else "body"
    return ValidationError(field, issue.get("msg", "invalid value"))


def parse_create(data: Any) -> StudentCreate:
    """Validate a creation payload.

    Raises:
        ValidationError: Naming the first offending field.
    """
    try:
        return StudentCreate.model_validate(data)
    except PydanticValidationError as e:
        raise _first_error(e) from e


def parse_update(data: Any) -> StudentUpdate:
    """Validate an update payload.

    Raises:
        ValidationError: Naming the first offending field.
    """
    try:
        return StudentUpdate.model_validate(data)
    except PydanticValidationError as e:
        raise _first_error(e) from e


_PAYLOAD_KEYS: dict[str, StudentField] = {
    **{field.value: field for field in StudentField},
    "firstName": StudentField.FIRST_NAME,
    "lastName": StudentField.LAST_NAME,
    "birthDate": StudentField.BIRTH_DATE,
    "desiredCourse": StudentField.DESIRED_COURSE,
}


def fields_in(data: Any) -> frozenset[StudentField]:
    """Student fields a raw payload carries a non-null value for.

    Used to authorize a request before its values are validated. Accepts
    both wire names and attribute names; unknown keys are ignored.

    Raises:
        ValidationError: If ``data`` is not a JSON object.
    """
    if not isinstance(data, dict):
        raise ValidationError("body", "expected a JSON object")
    found = set()
    for key, value in data.items():
        if value is None:
            continue
        field = _PAYLOAD_KEYS.get(key)
        if field is not None:
            found.add(field)
    return frozenset(found)
