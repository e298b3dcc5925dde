"""Tests for session models."""

import pytest
from pydantic import ValidationError

from shared.models import UserRole
from modules.session.models import (
    ErrorKind,
    LoginRequest,
    Session,
    SessionResponse,
    SessionStatus,
)

from tests.conftest import TEST_AUTH_ID, make_profile


class TestSession:
    def test_derived_fields(self):
        """Derived accessors read through to the profile."""
        session = Session(
            status=SessionStatus.AUTHENTICATED,
            user=make_profile(),
            auth_id=TEST_AUTH_ID,
        )
        assert session.authenticated is True
        assert session.connection_error is False
        assert session.user_id == "user-42"
        assert session.role == UserRole.MANAGER
        assert session.display_name == "Marie Dupont"

    def test_derived_fields_without_user(self):
        """Without a profile every derived accessor is None."""
        session = Session(status=SessionStatus.UNAUTHENTICATED)
        assert session.user_id is None
        assert session.email is None
        assert session.role is None
        assert session.display_name is None

    def test_frozen(self):
        """Sessions are immutable snapshots."""
        session = Session()
        with pytest.raises(ValidationError):
            session.status = SessionStatus.AUTHENTICATED


class TestLoginRequest:
    def test_requires_password(self):
        with pytest.raises(ValidationError):
            LoginRequest(email="marie@logitrack.test", password="")


class TestSessionResponse:
    def test_from_session(self):
        """The API response flattens the session and carries the message."""
        session = Session(status=SessionStatus.UNAUTHENTICATED, error_kind=ErrorKind.RATE_LIMITED)
        response = SessionResponse.from_session(session, "Trop de tentatives")
        assert response.status == SessionStatus.UNAUTHENTICATED
        assert response.authenticated is False
        assert response.error_kind == ErrorKind.RATE_LIMITED
        assert response.message == "Trop de tentatives"
