"""
Colis service.

Entry point of the parcel module for the API layer: opens trackers for the
detail view and creates parcels.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from shared.config import Settings, get_settings
from modules.session.interfaces import IProfileStore, ISessionService
from modules.session.service import find_profile

from .interfaces import IColisStore, IHistoryStore, IStatusCatalog
from .models import Colis, CreateColisRequest, NewHistoryEntry, suggest_colis_id, to_row
from .exceptions import ColisCreateError
from .tracker import ColisTracker

logger = logging.getLogger(__name__)


class ColisService:
    """Creates parcels and the per-view trackers that manage them."""

    def __init__(
        self,
        colis_store: IColisStore,
        history_store: IHistoryStore,
        catalog: IStatusCatalog,
        profiles: IProfileStore,
        session: ISessionService,
        settings: Optional[Settings] = None,
    ):
        self._colis_store = colis_store
        self._history_store = history_store
        self._catalog = catalog
        self._profiles = profiles
        self._session = session
        self._settings = settings or get_settings()

    def tracker(self) -> ColisTracker:
        """A fresh, unloaded tracker."""
        return ColisTracker(
            colis_store=self._colis_store,
            history_store=self._history_store,
            catalog=self._catalog,
            profiles=self._profiles,
            session=self._session,
            settings=self._settings,
        )

    async def open(self, colis_id: str) -> ColisTracker:
        """A tracker with the parcel already loaded."""
        tracker = self.tracker()
        await tracker.load(colis_id)
        return tracker

    def suggest_id(self) -> str:
        return suggest_colis_id()

    async def create_colis(self, request: CreateColisRequest) -> Colis:
        """
        Create a parcel and record its initial status.

        The parcel is kept even if the initial history entry cannot be
        attributed; that case is logged.
        """
        colis_id = request.id or self.suggest_id()
        now = datetime.now(timezone.utc)
        fields = request.model_dump(exclude={"id"})
        row = to_row(fields)
        row["id"] = colis_id
        row["date_creation"] = now.isoformat()

        try:
            colis = await self._colis_store.create(row)
        except Exception as exc:
            logger.error("Error creating colis %s: %s", colis_id, exc)
            raise ColisCreateError(colis_id, str(exc)) from exc

        await self._record_initial_status(colis, now)
        return colis

    async def _record_initial_status(self, colis: Colis, created_at: datetime) -> None:
        session = self._session.state
        if not session.authenticated:
            logger.warning("No authenticated user to attribute initial status of %s", colis.id)
            return
        try:
            actor = await find_profile(self._profiles, session.auth_id, session.email)
            if actor is None:
                logger.error(
                    "Current user %s not found in utilisateurs table, "
                    "initial status of %s not recorded",
                    session.auth_id, colis.id,
                )
                return
            await self._history_store.insert(
                NewHistoryEntry(
                    colis_id=colis.id,
                    status=colis.status,
                    date=created_at,
                    acting_user_id=actor.id,
                )
            )
        except Exception as exc:
            logger.error("Error adding initial status to historique for %s: %s", colis.id, exc)
