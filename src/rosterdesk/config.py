"""Runtime configuration for RosterDesk.

Settings are read once from ``ROSTERDESK_*`` environment variables at startup.
Tests build :class:`Settings` directly and hand them to ``create_app``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum

from rosterdesk.exceptions import ConfigError

ENV_PREFIX = "ROSTERDESK_"

DEFAULT_DB_PATH = "rosterdesk.db"
DEFAULT_ADMIN_PASSWORD = "admin"
DEFAULT_SESSION_SECRET = "change-me"
DEFAULT_BUSY_TIMEOUT = 5.0


class AttendanceScope(StrEnum):
    """How much of the attendance vector a course leader may overwrite."""

    SLOT = "slot"
    VECTOR = "vector"


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off", ""):
        return False
    raise ConfigError(f"{ENV_PREFIX}{name} must be a boolean, got '{raw}'")


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Attributes:
        db_path: SQLite database file. ":memory:" keeps the roster in memory.
        admin_password: Password for the administrator login.
        course_password: Password for course leader logins. Empty disables the check.
        session_secret: Key used to sign session cookies.
        attendance_scope: Attendance slots a course leader may write.
        busy_timeout: Seconds SQLite waits for a competing writer.
        cookie_secure: Whether the session cookie requires HTTPS.
    """

    db_path: str = DEFAULT_DB_PATH
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    course_password: str = ""
    session_secret: str = DEFAULT_SESSION_SECRET
    attendance_scope: AttendanceScope = AttendanceScope.SLOT
    busy_timeout: float = DEFAULT_BUSY_TIMEOUT
    cookie_secure: bool = False

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            Settings with defaults for every unset variable.

        Raises:
            ConfigError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ

        def get(name: str, default: str) -> str:
            return env.get(f"{ENV_PREFIX}{name}", default)

        scope_raw = get("ATTENDANCE_SCOPE", AttendanceScope.SLOT.value)
        try:
            scope = AttendanceScope(scope_raw.strip().lower())
        except ValueError as e:
            raise ConfigError(
                f"{ENV_PREFIX}ATTENDANCE_SCOPE must be 'slot' or 'vector', got '{scope_raw}'"
            ) from e

        timeout_raw = get("BUSY_TIMEOUT", str(DEFAULT_BUSY_TIMEOUT))
        try:
            busy_timeout = float(timeout_raw)
        except ValueError as e:
            raise ConfigError(
                f"{ENV_PREFIX}BUSY_TIMEOUT must be a number, got '{timeout_raw}'"
            ) from e
        if busy_timeout < 0:
            raise ConfigError(f"{ENV_PREFIX}BUSY_TIMEOUT must not be negative")

        session_secret = get("SESSION_SECRET", DEFAULT_SESSION_SECRET)
        if not session_secret:
            raise ConfigError(f"{ENV_PREFIX}SESSION_SECRET must not be empty")

        return cls(
            db_path=get("DB_PATH", DEFAULT_DB_PATH),
            admin_password=get("ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD),
            course_password=get("COURSE_PASSWORD", ""),
            session_secret=session_secret,
            attendance_scope=scope,
            busy_timeout=busy_timeout,
            cookie_secure=_parse_bool("COOKIE_SECURE", get("COOKIE_SECURE", "false")),
        )
