"""
Session module.

Owns the authenticated-user lifecycle: initial session probe, backend auth
events, login/logout, and the classification of connection versus
authentication failures.

Public API:
- ISessionService: Interface other modules depend on
- SessionService: The reconciliation engine
- find_profile: Auth identity to staff profile cross-reference
- Session, SessionStatus, ErrorKind: Session snapshot and its enums
- reduce, SessionAction: Pure state machine
- Session exceptions: InvalidCredentialsError, ProfileNotFoundError, etc.
"""

from .interfaces import IAuthBackend, IProfileStore, ISessionService
from .models import AuthEventType, AuthIdentity, ErrorKind, Session, SessionStatus
from .reducer import SessionAction, SessionActionType, reduce
from .service import SessionService, find_profile
from .exceptions import (
    SessionAuthError,
    SessionConnectionError,
    InvalidCredentialsError,
    EmailNotConfirmedError,
    RateLimitedError,
    ProfileNotFoundError,
    NotAuthenticatedError,
)

__all__ = [
    # Interfaces
    "IAuthBackend",
    "IProfileStore",
    "ISessionService",
    # Engine
    "SessionService",
    "find_profile",
    "SessionAction",
    "SessionActionType",
    "reduce",
    # Models
    "AuthEventType",
    "AuthIdentity",
    "ErrorKind",
    "Session",
    "SessionStatus",
    # Exceptions
    "SessionAuthError",
    "SessionConnectionError",
    "InvalidCredentialsError",
    "EmailNotConfirmedError",
    "RateLimitedError",
    "ProfileNotFoundError",
    "NotAuthenticatedError",
]
