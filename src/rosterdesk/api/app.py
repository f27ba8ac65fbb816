"""FastAPI application setup."""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rosterdesk import __version__
from rosterdesk.access import AuthorizationError, NotAuthenticatedError
from rosterdesk.api.dependencies import (
    close_roster_service,
    close_settings,
    init_roster_service,
    init_settings,
)
from rosterdesk.api.models import APIResponse
from rosterdesk.api.routes import auth, courses, students
from rosterdesk.api.session import LoginError
from rosterdesk.config import Settings
from rosterdesk.exceptions import RosterDeskError
from rosterdesk.logging import sanitize_for_log
from rosterdesk.roster import CourseLimitExceededError, StudentNotFoundError, ValidationError
from rosterdesk.roster_store import (
    DuplicateStudentIdError,
    RosterConflictError,
    StorageUnavailableError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=message).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    init_settings(settings)
    init_roster_service(settings)
    logger.info("Roster service started (db=%s)", settings.db_path)

    yield

    close_roster_service()
    close_settings()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="RosterDesk API",
        description="REST API for RosterDesk - course rosters with role-scoped editing",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings if settings is not None else Settings.from_env()

    # Exception handlers
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        issue = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in issue.get("loc", ())[1:]) or "body"
        logger.info(
            "Rejected request body: %s", sanitize_for_log(json.dumps(exc.body, default=str))
        )
        return _error(
            status.HTTP_400_BAD_REQUEST,
            f"Invalid field '{field}': {issue.get('msg', 'invalid value')}",
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(_request: Request, exc: ValidationError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated_handler(
        _request: Request, _exc: NotAuthenticatedError
    ) -> JSONResponse:
        return _error(status.HTTP_401_UNAUTHORIZED, "Not authenticated")

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(
        _request: Request, _exc: AuthorizationError
    ) -> JSONResponse:
        # Same text for every refusal so callers learn nothing about other courses
        return _error(status.HTTP_403_FORBIDDEN, "Not permitted")

    @app.exception_handler(LoginError)
    async def login_error_handler(_request: Request, exc: LoginError) -> JSONResponse:
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StudentNotFoundError)
    async def student_not_found_handler(
        _request: Request, _exc: StudentNotFoundError
    ) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "Student not found")

    @app.exception_handler(CourseLimitExceededError)
    async def course_limit_handler(
        _request: Request, exc: CourseLimitExceededError
    ) -> JSONResponse:
        return _error(
            status.HTTP_409_CONFLICT,
            f"Course limit exceeded: {exc.attempted} courses, at most {exc.allowed} allowed",
        )

    @app.exception_handler(RosterConflictError)
    async def roster_conflict_handler(_request: Request, _exc: RosterConflictError) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, "Roster changed concurrently, retry")

    @app.exception_handler(DuplicateStudentIdError)
    async def duplicate_id_handler(_request: Request, _exc: DuplicateStudentIdError) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, "Student id already exists")

    @app.exception_handler(StorageUnavailableError)
    async def storage_unavailable_handler(
        _request: Request, _exc: StorageUnavailableError
    ) -> JSONResponse:
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Storage unavailable")

    @app.exception_handler(RosterDeskError)
    async def roster_desk_error_handler(_request: Request, exc: RosterDeskError) -> JSONResponse:
        logger.error("Unhandled roster error: %s", exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    # Include routers
    app.include_router(auth.router, prefix="/api/v1")
    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(students.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()
