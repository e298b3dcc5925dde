"""
Supabase implementation of the auth backend contract.

Wraps the async GoTrue client of ``supabase.AsyncClient`` and converts its
responses into ``AuthIdentity`` values.
"""

import logging
from typing import Any, Callable, Optional

from supabase import AsyncClient

from .interfaces import AuthEventCallback
from .models import AuthIdentity
from .exceptions import InvalidCredentialsError

logger = logging.getLogger(__name__)


def _identity_from_user(user: Any) -> Optional[AuthIdentity]:
    if user is None:
        return None
    return AuthIdentity(id=str(user.id), email=getattr(user, "email", None) or "")


def _identity_from_session(session: Any) -> Optional[AuthIdentity]:
    if session is None:
        return None
    return _identity_from_user(getattr(session, "user", None))


class SupabaseAuthBackend:
    """IAuthBackend over Supabase Auth."""

    def __init__(self, client: AsyncClient):
        self._client = client

    async def sign_in(self, email: str, password: str) -> AuthIdentity:
        response = await self._client.auth.sign_in_with_password(
            {"email": email, "password": password}
        )
        identity = _identity_from_user(response.user)
        if identity is None:
            raise InvalidCredentialsError()
        return identity

    async def sign_out(self) -> None:
        await self._client.auth.sign_out()

    async def get_session(self) -> Optional[AuthIdentity]:
        session = await self._client.auth.get_session()
        return _identity_from_session(session)

    def on_auth_state_change(self, callback: AuthEventCallback) -> Callable[[], None]:
        def forward(event: Any, session: Any) -> None:
            logger.debug("Auth event received: %s", event)
            callback(str(event), _identity_from_session(session))

        subscription = self._client.auth.on_auth_state_change(forward)
        return subscription.unsubscribe
