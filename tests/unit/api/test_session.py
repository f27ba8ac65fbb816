"""Unit tests for session cookies and login checks."""

import pytest
from fastapi import status
from itsdangerous import URLSafeSerializer

from rosterdesk.access import ADMIN, ANONYMOUS, CourseLeaderIdentity
from rosterdesk.api.session import (
    SESSION_SALT,
    LoginError,
    SessionCodec,
    check_login,
    redirect_for,
)
from rosterdesk.config import Settings


@pytest.fixture
def codec() -> SessionCodec:
    """Codec with a test secret."""
    return SessionCodec("test-secret")


@pytest.fixture
def settings() -> Settings:
    """Settings with known passwords."""
    return Settings(admin_password="pw", course_password="", session_secret="test-secret")


@pytest.mark.unit
class TestSessionCodec:
    """Tests for SessionCodec."""

    def test_admin_round_trip(self, codec: SessionCodec) -> None:
        """Admin identity survives encoding."""
        assert codec.decode(codec.encode(ADMIN)) == ADMIN

    def test_course_leader_round_trip(self, codec: SessionCodec) -> None:
        """Course name is kept verbatim."""
        leader = CourseLeaderIdentity("Mathe Ä")

        assert codec.decode(codec.encode(leader)) == leader

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token_is_anonymous(self, codec: SessionCodec, token) -> None:
        """No cookie means no session."""
        assert codec.decode(token) == ANONYMOUS

    def test_tampered_token_is_anonymous(self, codec: SessionCodec) -> None:
        """A changed signature is rejected."""
        token = codec.encode(ADMIN)

        assert codec.decode(token[:-2] + "xx") == ANONYMOUS

    def test_other_secret_is_anonymous(self, codec: SessionCodec) -> None:
        """Tokens signed with another key are rejected."""
        assert SessionCodec("other").decode(codec.encode(ADMIN)) == ANONYMOUS

    def test_unknown_role_is_anonymous(self) -> None:
        """Correctly signed but unknown roles are ignored."""
        token = URLSafeSerializer("test-secret", salt=SESSION_SALT).dumps({"role": "root"})

        assert SessionCodec("test-secret").decode(token) == ANONYMOUS

    def test_non_dict_payload_is_anonymous(self) -> None:
        """Payloads must be objects."""
        token = URLSafeSerializer("test-secret", salt=SESSION_SALT).dumps(["admin"])

        assert SessionCodec("test-secret").decode(token) == ANONYMOUS

    def test_course_role_without_course(self) -> None:
        """A course session without a course name is unassigned."""
        token = URLSafeSerializer("test-secret", salt=SESSION_SALT).dumps({"role": "course"})

        assert SessionCodec("test-secret").decode(token) == CourseLeaderIdentity("")


@pytest.mark.unit
class TestRedirectFor:
    """Tests for redirect_for."""

    def test_redirects(self) -> None:
        """Each role lands on its own page."""
        assert redirect_for(ADMIN) == "/admin"
        assert redirect_for(CourseLeaderIdentity("Alg II")) == "/courses/Alg%20II"
        assert redirect_for(ANONYMOUS) == "/login"


@pytest.mark.unit
class TestCheckLogin:
    """Tests for check_login."""

    def test_admin_login(self, settings: Settings) -> None:
        """Correct admin password gives the admin identity."""
        assert check_login(settings, [], "admin", password="pw") == ADMIN

    def test_admin_wrong_password(self, settings: Settings) -> None:
        """Wrong admin password is a 401."""
        with pytest.raises(LoginError) as exc_info:
            check_login(settings, [], "admin", password="nope")

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_course_login(self, settings: Settings) -> None:
        """A known course gives a leader identity."""
        identity = check_login(settings, ["Math"], "course", course=" Math ")

        assert identity == CourseLeaderIdentity("Math")

    def test_course_login_empty_catalog(self, settings: Settings) -> None:
        """Any course is accepted before the roster references one."""
        assert check_login(settings, [], "course", course="Art") == CourseLeaderIdentity("Art")

    def test_course_login_without_course(self, settings: Settings) -> None:
        """A course must be chosen."""
        with pytest.raises(LoginError) as exc_info:
            check_login(settings, ["Math"], "course", course="  ")

        assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST

    def test_course_login_unknown_course(self, settings: Settings) -> None:
        """Courses missing from a non-empty catalog are a 404."""
        with pytest.raises(LoginError) as exc_info:
            check_login(settings, ["Math"], "course", course="Art")

        assert exc_info.value.status_code == status.HTTP_404_NOT_FOUND

    def test_course_password_checked_when_configured(self) -> None:
        """A configured course password must match."""
        settings = Settings(course_password="kurs")

        with pytest.raises(LoginError) as exc_info:
            check_login(settings, [], "course", password="falsch", course="Math")
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

        assert check_login(settings, [], "course", password="kurs", course="Math")

    def test_unknown_role(self, settings: Settings) -> None:
        """Roles other than admin and course are a 400."""
        with pytest.raises(LoginError) as exc_info:
            check_login(settings, [], "guest")

        assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST
