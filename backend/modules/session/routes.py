"""
Session API endpoints.

Expose the session engine to the front-end: read the current state, log in,
log out, and retry after a connection error.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_session_service

from .classifier import user_message
from .interfaces import ISessionService
from .models import LoginRequest, SessionResponse

router = APIRouter()


def _respond(service: ISessionService) -> SessionResponse:
    session = service.state
    message = user_message(session.error_kind) if session.error_kind else None
    return SessionResponse.from_session(session, message)


@router.get("", response_model=SessionResponse)
async def get_session(
    service: ISessionService = Depends(get_session_service),
) -> SessionResponse:
    """
    Current session state.

    ``connection_error`` means the UI should offer "retry";
    ``unauthenticated`` means it should offer "go to login".
    """
    return _respond(service)


@router.post("/login", response_model=SessionResponse)
async def login(
    request: LoginRequest,
    service: ISessionService = Depends(get_session_service),
) -> SessionResponse:
    """
    Log in with email and password.

    Failures are returned by the API error handler with the classified code
    (INVALID_CREDENTIALS, EMAIL_NOT_CONFIRMED, RATE_LIMITED,
    PROFILE_NOT_FOUND, CONNECTION_ERROR).
    """
    await service.login(request.email, request.password)
    return _respond(service)


@router.post("/logout", response_model=SessionResponse)
async def logout(
    service: ISessionService = Depends(get_session_service),
) -> SessionResponse:
    """Log out. Safe to call repeatedly."""
    await service.logout()
    return _respond(service)


@router.post("/retry", response_model=SessionResponse)
async def retry_connection(
    service: ISessionService = Depends(get_session_service),
) -> SessionResponse:
    """Re-run the session probe after a connection error."""
    await service.retry_connection()
    return _respond(service)
