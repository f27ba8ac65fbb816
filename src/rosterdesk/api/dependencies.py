"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends, Request

from rosterdesk.access import Identity
from rosterdesk.api.session import SessionCodec, identity_from_request
from rosterdesk.config import Settings
from rosterdesk.roster import RosterService
from rosterdesk.roster_store import RosterRepository

# Global RosterService instance (initialized on app startup)
_roster_service: RosterService | None = None


def init_roster_service(settings: Settings) -> RosterService:
    """Initialize the global RosterService instance."""
    global _roster_service  # noqa: PLW0603
    repository = RosterRepository(settings.db_path, busy_timeout=settings.busy_timeout)
    _roster_service = RosterService(repository, attendance_scope=settings.attendance_scope)
    return _roster_service


def close_roster_service() -> None:
    """Close the global RosterService instance."""
    global _roster_service  # noqa: PLW0603
    if _roster_service is not None:
        _roster_service.repository.close()
        _roster_service = None


def get_roster_service() -> Generator[RosterService, None, None]:
    """Dependency that provides the RosterService instance."""
    if _roster_service is None:
        raise RuntimeError("RosterService not initialized. Call init_roster_service() first.")
    yield _roster_service


# Type alias for dependency injection
RosterServiceDep = Annotated[RosterService, Depends(get_roster_service)]

# Global Settings instance
_settings: Settings | None = None
_session_codec: SessionCodec | None = None


def init_settings(settings: Settings) -> None:
    """Initialize the global Settings and the session codec derived from them."""
    global _settings, _session_codec  # noqa: PLW0603
    _settings = settings
    _session_codec = SessionCodec(settings.session_secret)


def close_settings() -> None:
    """Forget the global Settings."""
    global _settings, _session_codec  # noqa: PLW0603
    _settings = None
    _session_codec = None


def get_settings() -> Generator[Settings, None, None]:
    """Dependency that provides the Settings instance."""
    if _settings is None:
        raise RuntimeError("Settings not initialized. Call init_settings() first.")
    yield _settings


# Type alias for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_session_codec() -> Generator[SessionCodec, None, None]:
    """Dependency that provides the SessionCodec instance."""
    if _session_codec is None:
        raise RuntimeError("SessionCodec not initialized. Call init_settings() first.")
    yield _session_codec


SessionCodecDep = Annotated[SessionCodec, Depends(get_session_codec)]


def get_identity(request: Request, codec: SessionCodecDep) -> Identity:
    """Dependency that provides the caller's identity from the session cookie."""
    return identity_from_request(request, codec)


IdentityDep = Annotated[Identity, Depends(get_identity)]
