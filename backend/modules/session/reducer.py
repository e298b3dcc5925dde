"""
Pure session state machine.

``reduce(session, action)`` is the only place where session transitions are
decided. It performs no I/O, so every transition can be tested without a
backend.

    loading ──resolved──────────▶ authenticated
       │    ──signed_out/auth_failed──▶ unauthenticated
       │    ──connection_failed──▶ connection_error
    authenticated / unauthenticated / connection_error
            ──login_started──▶ loading
    connection_error ──retry_started──▶ loading
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel

from shared.models import UserProfile

from .models import ErrorKind, Session, SessionStatus


class SessionActionType(str, Enum):
    """Inputs to the session state machine."""

    PROBE_STARTED = "probe_started"
    LOGIN_STARTED = "login_started"
    RETRY_STARTED = "retry_started"
    RESOLVED = "resolved"
    TOKEN_REFRESHED = "token_refreshed"
    SIGNED_OUT = "signed_out"
    AUTH_FAILED = "auth_failed"
    CONNECTION_FAILED = "connection_failed"


class SessionAction(BaseModel):
    """A single state machine input with its payload."""

    type: SessionActionType
    user: Optional[UserProfile] = None
    auth_id: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    model_config = {"frozen": True}

    @classmethod
    def probe_started(cls) -> "SessionAction":
        return cls(type=SessionActionType.PROBE_STARTED)

    @classmethod
    def login_started(cls) -> "SessionAction":
        return cls(type=SessionActionType.LOGIN_STARTED)

    @classmethod
    def retry_started(cls) -> "SessionAction":
        return cls(type=SessionActionType.RETRY_STARTED)

    @classmethod
    def resolved(cls, user: UserProfile, auth_id: str) -> "SessionAction":
        return cls(type=SessionActionType.RESOLVED, user=user, auth_id=auth_id)

    @classmethod
    def token_refreshed(cls, auth_id: str) -> "SessionAction":
        return cls(type=SessionActionType.TOKEN_REFRESHED, auth_id=auth_id)

    @classmethod
    def signed_out(cls) -> "SessionAction":
        return cls(type=SessionActionType.SIGNED_OUT)

    @classmethod
    def auth_failed(cls, kind: ErrorKind) -> "SessionAction":
        return cls(type=SessionActionType.AUTH_FAILED, error_kind=kind)

    @classmethod
    def connection_failed(cls) -> "SessionAction":
        return cls(type=SessionActionType.CONNECTION_FAILED, error_kind=ErrorKind.CONNECTION)


INITIAL_SESSION = Session()

_LOADING = Session(status=SessionStatus.LOADING)
_SIGNED_OUT = Session(status=SessionStatus.UNAUTHENTICATED)


def reduce(session: Session, action: SessionAction) -> Session:
    """
    Compute the next session for an action.

    Returns the same object when the action does not apply to the current
    state, so callers can detect "no change" with an identity check.
    """
    kind = action.type

    if kind in (SessionActionType.PROBE_STARTED, SessionActionType.LOGIN_STARTED):
        return session if session == _LOADING else _LOADING

    if kind == SessionActionType.RETRY_STARTED:
        if session.status != SessionStatus.CONNECTION_ERROR:
            return session
        return _LOADING

    if kind == SessionActionType.RESOLVED:
        if action.user is None or action.auth_id is None:
            raise ValueError("resolved action requires a user and an auth_id")
        return Session(
            status=SessionStatus.AUTHENTICATED,
            user=action.user,
            auth_id=action.auth_id,
        )

    if kind == SessionActionType.TOKEN_REFRESHED:
        # Refresh keeps the held profile; a different identity goes through sign-in
        return session

    if kind == SessionActionType.SIGNED_OUT:
        if session == _SIGNED_OUT:
            return session
        return _SIGNED_OUT

    if kind == SessionActionType.AUTH_FAILED:
        return Session(
            status=SessionStatus.UNAUTHENTICATED,
            error_kind=action.error_kind or ErrorKind.UNKNOWN,
        )

    if kind == SessionActionType.CONNECTION_FAILED:
        return Session(
            status=SessionStatus.CONNECTION_ERROR,
            error_kind=ErrorKind.CONNECTION,
        )

    return session
