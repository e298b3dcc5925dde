"""
Error hierarchy shared by the session and colis modules.

Errors are grouped by what the caller can do about them: fix the request,
sign in again, ask an administrator for a profile, or wait for Supabase to
come back. Module exceptions subclass one of these groups and the API maps
each group to a single status code.
"""

from typing import Optional, Any


class LogitrackError(Exception):
    """
    Base for every error reported to a caller.

    ``code`` is the stable identifier clients switch on, ``message`` is
    shown as-is, and ``details`` carries the ids involved. ``retryable``
    tells the view whether offering "Réessayer" makes sense.
    """

    retryable = False

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Error body returned by the API."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
        }


class NotFoundError(LogitrackError):
    """A parcel or profile does not exist."""

    pass


class ValidationError(LogitrackError):
    """Input rejected before anything was written."""

    pass


class AuthenticationError(LogitrackError):
    """No usable session: rejected credentials, no session or no profile."""

    pass


class AuthorizationError(LogitrackError):
    """Signed in, but the session cannot be tied to the staff record an operation needs."""

    pass


class ConnectivityError(LogitrackError):
    """
    A backend could not be reached at all.

    Nothing answered, so the same call may succeed later. ``backend``
    names which one ("auth" or "database") in the details.
    """

    retryable = True
    backend = "database"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code or "CONNECTION_ERROR", details)
        self.details.setdefault("backend", self.backend)


class DataStoreError(LogitrackError):
    """
    The data store answered a read or write with an error.

    Subclasses set ``operation`` to the step that failed; it is added to
    the details so a partial failure can be told apart from a full one.
    """

    operation = "query"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.details.setdefault("operation", self.operation)
