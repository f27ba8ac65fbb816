"""Course catalog and course dashboard endpoints."""

from fastapi import APIRouter

from rosterdesk.api.dependencies import IdentityDep, RosterServiceDep
from rosterdesk.api.models import (
    APIResponse,
    CourseCatalogResponse,
    StudentResponse,
    student_to_response,
)

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=APIResponse[CourseCatalogResponse])
def list_courses(service: RosterServiceDep) -> APIResponse[CourseCatalogResponse]:
    """List the courses referenced by the roster, in display order."""
    return APIResponse(
        data=CourseCatalogResponse(courses=service.list_courses(), limit=service.course_limit)
    )


@router.get("/{course}/students", response_model=APIResponse[list[StudentResponse]])
def list_course_students(
    course: str, service: RosterServiceDep, identity: IdentityDep
) -> APIResponse[list[StudentResponse]]:
    """List the students desiring or enrolled in a course."""
    students = service.course_students(identity, course)
    return APIResponse(data=[student_to_response(s) for s in students])
