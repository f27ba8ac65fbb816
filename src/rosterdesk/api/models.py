"""Pydantic models for REST API."""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Student models


class StudentResponse(BaseModel):
    """Response model for a student."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    first_name: str
    last_name: str
    gender: str
    birth_date: str
    school: str
    desired_course: str
    courses: list[str]
    attendance: list[str]
    av: str
    sv: str


def student_to_response(student: Any) -> StudentResponse:
    """Convert a Student record to StudentResponse."""
    return StudentResponse.model_validate(student)


# Course models


class CourseCatalogResponse(BaseModel):
    """Response model for the course catalog."""

    courses: list[str]
    limit: int


# Session models


class LoginRequest(BaseModel):
    """Request model for logging in."""

    role: Literal["admin", "course"]
    password: str | None = Field(default=None, max_length=255)
    course: str | None = Field(default=None, max_length=255)


class SessionResponse(BaseModel):
    """Response model describing the current session."""

    role: str
    course: str | None = None
    redirect: str | None = None
