"""Session cookies and login checks.

Identities travel in a signed cookie. The roster core only ever sees the
decoded :mod:`rosterdesk.access` identity; passwords are checked here and
nowhere else.
"""

from __future__ import annotations

import hmac
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from fastapi import status
from itsdangerous import BadSignature, URLSafeSerializer

from rosterdesk.access import (
    ADMIN,
    ANONYMOUS,
    AdminIdentity,
    AnonymousIdentity,
    CourseLeaderIdentity,
    Identity,
    Role,
)
from rosterdesk.exceptions import RosterDeskError

if TYPE_CHECKING:
    from collections.abc import Collection

    from fastapi import Request, Response

    from rosterdesk.config import Settings

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "rosterdesk_session"
SESSION_SALT = "rosterdesk-session"
SESSION_MAX_AGE = 60 * 60 * 12  # 12h


class LoginError(RosterDeskError):
    """Login attempt rejected."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SessionCodec:
    """Signs identities into cookie values and back."""

    def __init__(self, secret: str) -> None:
        self._serializer = URLSafeSerializer(secret, salt=SESSION_SALT)

    def encode(self, identity: Identity) -> str:
        """Serialize an identity into a signed token."""
        payload: dict[str, Any] = {"role": identity.role.value}
        if isinstance(identity, CourseLeaderIdentity):
            payload["course"] = identity.course
        return self._serializer.dumps(payload)

    def decode(self, token: str | None) -> Identity:
        """Turn a signed token back into an identity.

        Missing, tampered or malformed tokens yield the anonymous identity.
        """
        if not token:
            return ANONYMOUS
        try:
            payload = self._serializer.loads(token)
        except BadSignature:
            logger.warning("Session cookie with invalid signature ignored")
            return ANONYMOUS
        if not isinstance(payload, dict):
            logger.warning("Malformed session payload ignored")
            return ANONYMOUS

        role = payload.get("role")
        if role == Role.ADMIN:
            return ADMIN
        if role == Role.COURSE:
            course = payload.get("course")
            return CourseLeaderIdentity(course if isinstance(course, str) else "")
        logger.warning("Session with unknown role %r ignored", role)
        return ANONYMOUS


def identity_from_request(request: Request, codec: SessionCodec) -> Identity:
    """Resolve the caller's identity from the session cookie."""
    return codec.decode(request.cookies.get(SESSION_COOKIE_NAME))


def set_session_cookie(response: Response, token: str, secure: bool) -> None:
    """Attach the session cookie to a response."""
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=SESSION_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=secure,
    )


def clear_session_cookie(response: Response, secure: bool) -> None:
    """Expire the session cookie."""
    response.delete_cookie(SESSION_COOKIE_NAME, httponly=True, samesite="lax", secure=secure)


def redirect_for(identity: Identity) -> str | None:
    """Landing page for an identity."""
    match identity:
        case AdminIdentity():
            return "/admin"
        case CourseLeaderIdentity(course=course):
            return f"/courses/{quote(course, safe='')}"
        case AnonymousIdentity():
            return "/login"
    return None


def _matches(given: str | None, expected: str) -> bool:
    return hmac.compare_digest((given or "").encode("utf-8"), expected.encode("utf-8"))


def check_login(
    settings: Settings,
    known_courses: Collection[str],
    role: str,
    password: str | None = None,
    course: str | None = None,
) -> Identity:
    """Validate login credentials and return the identity to store.

    Args:
        settings: Configured passwords.
        known_courses: Current course catalog.
        role: "admin" or "course".
        password: Password as entered.
        course: Course chosen by a course leader.

    Raises:
        LoginError: With the HTTP status to answer with.
    """
    if role == Role.ADMIN:
        if not _matches(password, settings.admin_password):
            logger.warning("Administrator login with wrong password")
            raise LoginError("Wrong administrator password", status.HTTP_401_UNAUTHORIZED)
        return ADMIN

    if role != Role.COURSE:
        raise LoginError("Invalid login data", status.HTTP_400_BAD_REQUEST)

    selected = (course or "").strip()
    if not selected:
        raise LoginError("Please select a course", status.HTTP_400_BAD_REQUEST)

    if settings.course_password and not _matches(password, settings.course_password):
        logger.warning("Course leader login for %s with wrong password", selected)
        raise LoginError("Wrong course leader password", status.HTTP_401_UNAUTHORIZED)

    if known_courses and selected not in known_courses:
        raise LoginError("This course does not exist yet", status.HTTP_404_NOT_FOUND)

    return CourseLeaderIdentity(selected)
