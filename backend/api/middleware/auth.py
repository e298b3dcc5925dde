"""
Session guard for protected routes.

The back-office runs one session per process; protected routes only check
that this session is authenticated.
"""

from fastapi import Depends

from modules.session.exceptions import NotAuthenticatedError, SessionConnectionError
from modules.session.interfaces import ISessionService
from modules.session.models import Session

from ..dependencies import get_session_service


async def require_session(
    service: ISessionService = Depends(get_session_service),
) -> Session:
    """
    Dependency that requires an authenticated session.

    Usage:
        @router.get("/protected")
        async def protected_route(session: Session = Depends(require_session)):
            return {"user_id": session.user_id}

    Raises:
        SessionConnectionError: The backend could not be reached (503)
        NotAuthenticatedError: Nobody is logged in (401)
    """
    session = service.state
    if session.connection_error:
        raise SessionConnectionError()
    if not session.authenticated:
        raise NotAuthenticatedError()
    return session


# Type alias for cleaner route definitions
RequireSession = Depends(require_session)
