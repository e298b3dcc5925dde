"""
Session module interfaces.

The engine talks to the hosted auth service and to the staff profile table
only through these protocols. Other modules depend on ISessionService, not
on the concrete engine.
"""

from typing import Callable, Optional, Protocol, runtime_checkable

from shared.models import UserProfile

from .models import AuthIdentity, Session

AuthEventCallback = Callable[[str, Optional[AuthIdentity]], None]
SessionListener = Callable[[Session], None]


@runtime_checkable
class IAuthBackend(Protocol):
    """Contract of the hosted authentication service."""

    async def sign_in(self, email: str, password: str) -> AuthIdentity:
        """
        Check credentials and open a session.

        Raises:
            Exception: Whatever the backend raises; the engine classifies it.
        """
        ...

    async def sign_out(self) -> None:
        """Close the current backend session."""
        ...

    async def get_session(self) -> Optional[AuthIdentity]:
        """Return the identity of a previously issued session, if any."""
        ...

    def on_auth_state_change(self, callback: AuthEventCallback) -> Callable[[], None]:
        """
        Register a callback for auth events (SIGNED_IN, SIGNED_OUT, ...).

        Returns:
            A function that removes the subscription.
        """
        ...


@runtime_checkable
class IProfileStore(Protocol):
    """Lookup of application-level staff profiles."""

    async def get_user_by_id(self, user_id: str) -> Optional[UserProfile]:
        ...

    async def get_user_by_auth_id(self, auth_id: str) -> Optional[UserProfile]:
        ...

    async def get_user_by_email(self, email: str) -> Optional[UserProfile]:
        ...


@runtime_checkable
class ISessionService(Protocol):
    """
    Interface of the session engine as seen by the rest of the application.

    ``state`` is read-only; the three operations below are the only way to
    change it from outside the engine.
    """

    @property
    def state(self) -> Session:
        ...

    async def login(self, email: str, password: str) -> Session:
        """
        Sign in and resolve the staff profile.

        Raises:
            SessionAuthError: Credentials rejected or profile missing
            SessionConnectionError: Backend unreachable
        """
        ...

    async def logout(self) -> Session:
        """Sign out; concurrent calls are no-ops."""
        ...

    async def retry_connection(self) -> Session:
        """Re-run the initial probe after a connection error."""
        ...

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Be notified of every new session snapshot."""
        ...
