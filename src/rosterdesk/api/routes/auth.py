"""Login, logout and session endpoints."""

from fastapi import APIRouter, Response

from rosterdesk.access import ANONYMOUS, CourseLeaderIdentity, Identity
from rosterdesk.api.dependencies import (
    IdentityDep,
    RosterServiceDep,
    SessionCodecDep,
    SettingsDep,
)
from rosterdesk.api.models import APIResponse, LoginRequest, SessionResponse
from rosterdesk.api.session import (
    check_login,
    clear_session_cookie,
    redirect_for,
    set_session_cookie,
)

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_response(identity: Identity) -> SessionResponse:
    course = identity.course if isinstance(identity, CourseLeaderIdentity) else None
    return SessionResponse(role=identity.role.value, course=course, redirect=redirect_for(identity))


@router.post("/login", response_model=APIResponse[SessionResponse])
def login(
    credentials: LoginRequest,
    response: Response,
    service: RosterServiceDep,
    settings: SettingsDep,
    codec: SessionCodecDep,
) -> APIResponse[SessionResponse]:
    """Log in as administrator or course leader."""
    identity = check_login(
        settings,
        service.list_courses(),
        role=credentials.role,
        password=credentials.password,
        course=credentials.course,
    )
    set_session_cookie(response, codec.encode(identity), secure=settings.cookie_secure)
    return APIResponse(data=_session_response(identity))


@router.post("/logout", response_model=APIResponse[SessionResponse])
def logout(response: Response, settings: SettingsDep) -> APIResponse[SessionResponse]:
    """End the current session."""
    clear_session_cookie(response, secure=settings.cookie_secure)
    return APIResponse(data=_session_response(ANONYMOUS))


@router.get("/session", response_model=APIResponse[SessionResponse])
def current_session(identity: IdentityDep) -> APIResponse[SessionResponse]:
    """Describe the caller's session."""
    return APIResponse(data=_session_response(identity))
