"""
Session module exceptions.

Each failure kind the login form distinguishes has its own class, so the
API layer can map them to status codes and the front-end can pick the
right message.
"""

from typing import Optional

from shared.exceptions import AuthenticationError, ConnectivityError

from .models import ErrorKind


class SessionConnectionError(ConnectivityError):
    """Raised when the auth backend cannot be reached."""

    kind = ErrorKind.CONNECTION
    backend = "auth"

    def __init__(self, message: str = "Unable to reach the authentication service"):
        super().__init__(message)


class SessionAuthError(AuthenticationError):
    """Base class for authentication failures with a classified kind."""

    kind = ErrorKind.UNKNOWN

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, code=code or "AUTHENTICATION_FAILED", details=details)


class InvalidCredentialsError(SessionAuthError):
    """Raised when the email/password pair is rejected."""

    kind = ErrorKind.INVALID_CREDENTIALS

    def __init__(self, message: str = "Invalid login credentials"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class EmailNotConfirmedError(SessionAuthError):
    """Raised when the account email has not been confirmed."""

    kind = ErrorKind.EMAIL_NOT_CONFIRMED

    def __init__(self, message: str = "Email not confirmed"):
        super().__init__(message, code="EMAIL_NOT_CONFIRMED")


class RateLimitedError(SessionAuthError):
    """Raised when the backend throttles login attempts."""

    kind = ErrorKind.RATE_LIMITED

    def __init__(self, message: str = "Too many requests"):
        super().__init__(message, code="RATE_LIMITED")


class ProfileNotFoundError(SessionAuthError):
    """Raised when no staff profile matches the auth identity."""

    kind = ErrorKind.PROFILE_NOT_FOUND

    def __init__(self, auth_id: str, email: Optional[str] = None):
        super().__init__(
            f"User profile not found for auth identity: {auth_id}",
            code="PROFILE_NOT_FOUND",
            details={"auth_id": auth_id, "email": email},
        )


class NotAuthenticatedError(SessionAuthError):
    """Raised when an operation requires an authenticated session."""

    kind = ErrorKind.NO_SESSION

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="NOT_AUTHENTICATED")
