"""
Failure classification for the session engine.

The rest of the engine depends only on ``ErrorKind``. How a raw backend
failure maps to a kind is the job of an ``ErrorClassifier``; the default
one matches known message fragments, which is what the Supabase clients
give us to work with.
"""

import asyncio
from typing import Protocol, runtime_checkable

from shared.exceptions import LogitrackError

from .models import ErrorKind
from .exceptions import (
    EmailNotConfirmedError,
    InvalidCredentialsError,
    NotAuthenticatedError,
    RateLimitedError,
    SessionAuthError,
    SessionConnectionError,
)


@runtime_checkable
class ErrorClassifier(Protocol):
    """Maps a raised failure to an ErrorKind."""

    def classify(self, error: BaseException) -> ErrorKind:
        ...


NETWORK_PATTERNS: tuple[str, ...] = (
    "failed to fetch",
    "networkerror",
    "network error",
    "network request failed",
    "connection refused",
    "connection reset",
    "connecterror",
    "connection error",
    "econnrefused",
    "enotfound",
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo",
    "temporary failure in name resolution",
    "ssl",
    "certificate verify failed",
    "timed out",
    "timeout",
)

CREDENTIAL_PATTERNS: dict[ErrorKind, tuple[str, ...]] = {
    ErrorKind.INVALID_CREDENTIALS: ("invalid login credentials", "invalid credentials"),
    ErrorKind.EMAIL_NOT_CONFIRMED: ("email not confirmed",),
    ErrorKind.RATE_LIMITED: ("too many requests", "rate limit"),
    ErrorKind.NO_SESSION: (
        "auth session missing",
        "invalid refresh token",
        "refresh token not found",
    ),
    ErrorKind.PROFILE_NOT_FOUND: ("profile not found",),
}


class MessagePatternClassifier:
    """Classifies failures by exception type, then by message substrings."""

    def __init__(
        self,
        network_patterns: tuple[str, ...] = NETWORK_PATTERNS,
        credential_patterns: dict[ErrorKind, tuple[str, ...]] = CREDENTIAL_PATTERNS,
    ):
        self._network_patterns = network_patterns
        self._credential_patterns = credential_patterns

    def classify(self, error: BaseException) -> ErrorKind:
        kind = getattr(error, "kind", None)
        if isinstance(kind, ErrorKind):
            return kind

        if isinstance(error, (asyncio.TimeoutError, TimeoutError, ConnectionError, OSError)):
            return ErrorKind.CONNECTION

        message = str(getattr(error, "message", None) or error).lower()
        for candidate, patterns in self._credential_patterns.items():
            if any(pattern in message for pattern in patterns):
                return candidate
        if any(pattern in message for pattern in self._network_patterns):
            return ErrorKind.CONNECTION
        return ErrorKind.UNKNOWN


USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.CONNECTION: (
        "Impossible de se connecter au serveur. "
        "Veuillez vérifier votre connexion internet et réessayer."
    ),
    ErrorKind.INVALID_CREDENTIALS: "Email ou mot de passe incorrect",
    ErrorKind.EMAIL_NOT_CONFIRMED: "Veuillez confirmer votre email avant de vous connecter",
    ErrorKind.RATE_LIMITED: "Trop de tentatives. Veuillez attendre avant de réessayer",
    ErrorKind.PROFILE_NOT_FOUND: (
        "Profil utilisateur introuvable. "
        "Veuillez contacter votre administrateur."
    ),
    ErrorKind.NO_SESSION: "Veuillez vous connecter",
    ErrorKind.UNKNOWN: "Erreur de connexion. Veuillez réessayer.",
}


def user_message(kind: ErrorKind) -> str:
    """User-facing message for an error kind."""
    return USER_MESSAGES[kind]


def is_retryable(kind: ErrorKind) -> bool:
    """Connection failures offer "retry"; everything else offers "go to login"."""
    return kind == ErrorKind.CONNECTION


_ERRORS_BY_KIND: dict[ErrorKind, type[SessionAuthError]] = {
    ErrorKind.INVALID_CREDENTIALS: InvalidCredentialsError,
    ErrorKind.EMAIL_NOT_CONFIRMED: EmailNotConfirmedError,
    ErrorKind.RATE_LIMITED: RateLimitedError,
    ErrorKind.NO_SESSION: NotAuthenticatedError,
}


def to_session_error(error: BaseException, kind: ErrorKind) -> LogitrackError:
    """
    Convert a raw failure into the module exception for its kind.

    Errors that are already LogitrackErrors are returned unchanged.
    """
    if isinstance(error, LogitrackError):
        return error
    if kind == ErrorKind.CONNECTION:
        return SessionConnectionError(str(error) or "Unable to reach the authentication service")
    error_class = _ERRORS_BY_KIND.get(kind)
    if error_class is not None:
        return error_class(str(error) or error_class.__name__)
    return SessionAuthError(str(error) or "Authentication failed")
