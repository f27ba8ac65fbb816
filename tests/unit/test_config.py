"""Unit tests for Settings."""

import dataclasses

import pytest

from rosterdesk.config import AttendanceScope, Settings
from rosterdesk.exceptions import ConfigError


@pytest.mark.unit
class TestDefaults:
    """Tests for default settings."""

    def test_empty_environment(self) -> None:
        """Every unset variable falls back to its default."""
        settings = Settings.from_env({})

        assert settings == Settings()
        assert settings.db_path == "rosterdesk.db"
        assert settings.course_password == ""
        assert settings.attendance_scope is AttendanceScope.SLOT
        assert settings.busy_timeout == 5.0
        assert settings.cookie_secure is False

    def test_settings_are_frozen(self) -> None:
        """Settings cannot be changed after startup."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            Settings().db_path = "other.db"  # type: ignore[misc]


@pytest.mark.unit
class TestFromEnv:
    """Tests for Settings.from_env."""

    def test_reads_prefixed_variables(self) -> None:
        """ROSTERDESK_* variables override defaults."""
        settings = Settings.from_env(
            {
                "ROSTERDESK_DB_PATH": "/data/roster.db",
                "ROSTERDESK_ADMIN_PASSWORD": "s3cret",
                "ROSTERDESK_COURSE_PASSWORD": "kurs",
                "ROSTERDESK_SESSION_SECRET": "sign-me",
                "ROSTERDESK_ATTENDANCE_SCOPE": "Vector",
                "ROSTERDESK_BUSY_TIMEOUT": "2.5",
                "ROSTERDESK_COOKIE_SECURE": "yes",
            }
        )

        assert settings.db_path == "/data/roster.db"
        assert settings.admin_password == "s3cret"
        assert settings.course_password == "kurs"
        assert settings.session_secret == "sign-me"
        assert settings.attendance_scope is AttendanceScope.VECTOR
        assert settings.busy_timeout == 2.5
        assert settings.cookie_secure is True

    def test_ignores_unprefixed_variables(self) -> None:
        """Variables without the prefix are not read."""
        assert Settings.from_env({"DB_PATH": "x.db"}).db_path == "rosterdesk.db"

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """os.environ is used when no mapping is given."""
        monkeypatch.setenv("ROSTERDESK_DB_PATH", "env.db")

        assert Settings.from_env().db_path == "env.db"

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("ROSTERDESK_ATTENDANCE_SCOPE", "row"),
            ("ROSTERDESK_BUSY_TIMEOUT", "soon"),
            ("ROSTERDESK_BUSY_TIMEOUT", "-1"),
            ("ROSTERDESK_SESSION_SECRET", ""),
            ("ROSTERDESK_COOKIE_SECURE", "maybe"),
        ],
    )
    def test_invalid_values_raise(self, name: str, value: str) -> None:
        """ConfigError names the offending variable."""
        with pytest.raises(ConfigError) as exc_info:
            Settings.from_env({name: value})

        assert name in str(exc_info.value)
