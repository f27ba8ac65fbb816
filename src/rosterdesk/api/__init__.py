"""REST API for RosterDesk."""

from rosterdesk.api.app import app, create_app
from rosterdesk.api.models import (
    APIResponse,
    CourseCatalogResponse,
    LoginRequest,
    SessionResponse,
    StudentResponse,
)

__all__ = [
    "APIResponse",
    "CourseCatalogResponse",
    "LoginRequest",
    "SessionResponse",
    "StudentResponse",
    "app",
    "create_app",
]
