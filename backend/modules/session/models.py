"""
Session module data models.

The session is an immutable snapshot; the engine replaces it on every
transition and consumers only ever read it.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from shared.models import UserProfile, UserRole


class SessionStatus(str, Enum):
    """Authenticated-user lifecycle state."""

    LOADING = "loading"                    # Before the first resolution
    AUTHENTICATED = "authenticated"        # Profile resolved
    UNAUTHENTICATED = "unauthenticated"    # No valid session
    CONNECTION_ERROR = "connection_error"  # Backend unreachable


class ErrorKind(str, Enum):
    """Closed classification of session failures."""

    CONNECTION = "connection"
    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_NOT_CONFIRMED = "email_not_confirmed"
    RATE_LIMITED = "rate_limited"
    PROFILE_NOT_FOUND = "profile_not_found"
    NO_SESSION = "no_session"
    UNKNOWN = "unknown"


class AuthEventType(str, Enum):
    """Auth events pushed by the backend client that the engine acts on."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


class AuthIdentity(BaseModel):
    """Raw authentication identity (auth user), distinct from the profile."""

    id: str = Field(..., description="Auth user ID (UUID)")
    email: str = Field(default="", description="Auth user email")

    model_config = {"frozen": True}


class Session(BaseModel):
    """
    Snapshot of who is logged in.

    ``authenticated`` and ``connection_error`` both derive from the single
    ``status`` field, so they can never be true at the same time.
    """

    status: SessionStatus = SessionStatus.LOADING
    user: Optional[UserProfile] = None
    auth_id: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    model_config = {"frozen": True}

    @property
    def authenticated(self) -> bool:
        return self.status == SessionStatus.AUTHENTICATED

    @property
    def connection_error(self) -> bool:
        return self.status == SessionStatus.CONNECTION_ERROR

    @property
    def loading(self) -> bool:
        return self.status == SessionStatus.LOADING

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user else None

    @property
    def email(self) -> Optional[str]:
        return self.user.email if self.user else None

    @property
    def role(self) -> Optional[UserRole]:
        return self.user.role if self.user else None

    @property
    def display_name(self) -> Optional[str]:
        return self.user.display_name if self.user else None


class LoginRequest(BaseModel):
    """Credentials submitted from the login form."""

    email: str = Field(..., min_length=3, description="Account email")
    password: str = Field(..., min_length=1, description="Account password")


class SessionResponse(BaseModel):
    """Session state as returned by the API."""

    status: SessionStatus
    authenticated: bool
    connection_error: bool
    user_id: Optional[str] = None
    email: Optional[str] = None
    role: Optional[UserRole] = None
    display_name: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def from_session(cls, session: Session, message: Optional[str] = None) -> "SessionResponse":
        return cls(
            status=session.status,
            authenticated=session.authenticated,
            connection_error=session.connection_error,
            user_id=session.user_id,
            email=session.email,
            role=session.role,
            display_name=session.display_name,
            error_kind=session.error_kind,
            message=message,
        )
