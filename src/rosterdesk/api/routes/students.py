"""Student CRUD endpoints."""

from typing import Any

from fastapi import APIRouter, Body, status

from rosterdesk.api.dependencies import IdentityDep, RosterServiceDep
from rosterdesk.api.models import APIResponse, StudentResponse, student_to_response

router = APIRouter(prefix="/students", tags=["students"])


@router.get("", response_model=APIResponse[list[StudentResponse]])
def list_students(
    service: RosterServiceDep, identity: IdentityDep
) -> APIResponse[list[StudentResponse]]:
    """List the students visible to the caller."""
    students = service.list_students(identity)
    return APIResponse(data=[student_to_response(s) for s in students])


@router.post(
    "",
    response_model=APIResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_student(
    service: RosterServiceDep,
    identity: IdentityDep,
    payload: dict[str, Any] = Body(...),
) -> APIResponse[StudentResponse]:
    """Create a new student (admin only)."""
    created = service.create_student(identity, payload)
    return APIResponse(data=student_to_response(created))


@router.get("/{student_id}", response_model=APIResponse[StudentResponse])
def get_student(
    student_id: str, service: RosterServiceDep, identity: IdentityDep
) -> APIResponse[StudentResponse]:
    """Get a student by ID."""
    student = service.get_student(identity, student_id)
    return APIResponse(data=student_to_response(student))


@router.api_route(
    "/{student_id}",
    methods=["PUT", "PATCH"],
    response_model=APIResponse[StudentResponse],
)
def update_student(
    student_id: str,
    service: RosterServiceDep,
    identity: IdentityDep,
    payload: dict[str, Any] = Body(...),
) -> APIResponse[StudentResponse]:
    """Update a student (partial update, fields limited by role)."""
    updated = service.update_student(identity, student_id, payload)
    return APIResponse(data=student_to_response(updated))


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(student_id: str, service: RosterServiceDep, identity: IdentityDep) -> None:
    """Delete a student (admin only)."""
    service.delete_student(identity, student_id)
