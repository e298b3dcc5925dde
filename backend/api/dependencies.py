"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete Supabase-backed implementations.

The session engine is process-wide: it is built and started once in the
application lifespan and shared by every request.
"""

import logging
from typing import TYPE_CHECKING, Optional

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.session.interfaces import IProfileStore, ISessionService
    from modules.colis.service import ColisService

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for all service instances.

    ``startup()`` creates the Supabase client and the services that depend
    on it; ``shutdown()`` stops the session engine. Accessing a service
    before startup raises RuntimeError.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._session_service: "ISessionService | None" = None
        self._profiles: "IProfileStore | None" = None
        self._colis_service: "ColisService | None" = None

    @property
    def started(self) -> bool:
        return self._session_service is not None

    async def startup(self) -> None:
        """Create the backend client, wire the services and start the session engine."""
        if self.started:
            return

        from shared.database import get_supabase_client
        from modules.session.backends import SupabaseAuthBackend
        from modules.session.repository import ProfileRepository
        from modules.session.service import SessionService
        from modules.colis.repository import (
            ColisRepository,
            HistoryRepository,
            StatusCatalogRepository,
        )
        from modules.colis.service import ColisService

        client = await get_supabase_client()
        profiles = ProfileRepository(client)
        session = SessionService(
            auth_backend=SupabaseAuthBackend(client),
            profiles=profiles,
            settings=self._settings,
        )
        colis_service = ColisService(
            colis_store=ColisRepository(client),
            history_store=HistoryRepository(client),
            catalog=StatusCatalogRepository(client),
            profiles=profiles,
            session=session,
            settings=self._settings,
        )

        self._profiles = profiles
        self._session_service = session
        self._colis_service = colis_service

        state = await session.start()
        logger.info("Session engine started in state %s", state.status.value)

    async def shutdown(self) -> None:
        """Stop the session engine; safe to call when startup never ran."""
        if self._session_service is not None:
            await self._session_service.close()
        self.reset()

    @property
    def session(self) -> "ISessionService":
        """Get the session service instance."""
        return self._require(self._session_service, "session")

    @property
    def profiles(self) -> "IProfileStore":
        """Get the profile store instance."""
        return self._require(self._profiles, "profiles")

    @property
    def colis(self) -> "ColisService":
        """Get the colis service instance."""
        return self._require(self._colis_service, "colis")

    def reset(self) -> None:
        """
        Drop all service instances.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._session_service = None
        self._profiles = None
        self._colis_service = None

    @staticmethod
    def _require(service, name: str):
        if service is None:
            raise RuntimeError(f"Service container not started: {name} unavailable")
        return service


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_session_service() -> "ISessionService":
    """FastAPI dependency for the session engine."""
    return get_container().session


def get_colis_service() -> "ColisService":
    """FastAPI dependency for the colis service."""
    return get_container().colis
