"""
Parcel status/history tracker.

One tracker backs one parcel detail view. It holds a view-scoped copy of
the parcel, its recent history and the status catalog, and keeps that copy
consistent with the store by re-fetching after each mutation.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from shared.config import Settings, get_settings
from shared.models import UserProfile
from modules.session.interfaces import IProfileStore, ISessionService
from modules.session.service import find_profile

from .interfaces import IColisStore, IHistoryStore, IStatusCatalog
from .models import (
    Colis,
    ColisDetail,
    HistoryEntry,
    NewHistoryEntry,
    StatusDefinition,
    status_badge,
    to_row,
)
from .exceptions import (
    ActingUserNotFoundError,
    ColisDeleteError,
    ColisEditError,
    ColisLoadError,
    ColisNotFoundError,
    ColisNotLoadedError,
    HistoryInsertError,
    InvalidStatusError,
    StatusUpdateError,
)

logger = logging.getLogger(__name__)


class ColisTracker:
    """
    View-scoped state and status workflow for a single parcel.

    Pending flags (``loading``, ``updating``, ``deleting``, ``refreshing``)
    mirror the spinners the view shows while a call is in progress.
    """

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

        self.colis: Optional[Colis] = None
        self.history: list[HistoryEntry] = []
        self.statuses: list[StatusDefinition] = []

        self.loading = False
        self.updating = False
        self.deleting = False
        self.refreshing = False

    @property
    def detail(self) -> ColisDetail:
        colis = self._require_colis()
        return ColisDetail(
            colis=colis,
            history=list(self.history),
            statuses=list(self.statuses),
            badge=status_badge(colis.status, self.statuses),
        )

    async def load(self, colis_id: str) -> ColisDetail:
        """
        Fetch the parcel, its latest history and the status catalog.

        Raises:
            ColisNotFoundError: No parcel with this id
            ColisLoadError: Any fetch failed
        """
        self.loading = True
        try:
            try:
                colis = await self._colis_store.get_by_id(colis_id)
            except Exception as exc:
                logger.error("Error fetching colis %s: %s", colis_id, exc)
                raise ColisLoadError(colis_id, str(exc)) from exc
            if colis is None:
                raise ColisNotFoundError(colis_id)

            try:
                history = await self._history_store.list_for_colis(
                    colis_id, limit=self._settings.history_limit
                )
            except Exception as exc:
                logger.error("Error fetching historique for %s: %s", colis_id, exc)
                raise ColisLoadError(colis_id, f"historique: {exc}") from exc

            try:
                statuses = await self._catalog.get_active(self._settings.colis_status_type)
            except Exception as exc:
                logger.error("Error fetching statuses: %s", exc)
                raise ColisLoadError(colis_id, f"statuts: {exc}") from exc
        finally:
            self.loading = False

        self.colis = colis
        self.history = history
        self.statuses = statuses
        return self.detail

    async def update_status(self, new_status: str) -> ColisDetail:
        """
        Move the parcel to ``new_status`` and record who did it.

        Steps, each waiting for the previous one: resolve the acting
        profile, persist the status, append one history entry, update the
        local copy, then re-fetch the history after a short settling delay.
        On failure the displayed status stays at its previous value.

        Raises:
            InvalidStatusError: Status not in the loaded catalog
            ActingUserNotFoundError: Session cannot be tied to a profile
            StatusUpdateError: Persisting the status failed
            HistoryInsertError: Status persisted but the history entry failed
        """
        previous = self._require_colis()
        if new_status == previous.status:
            return self.detail
        self._validate_status(new_status)

        self.updating = True
        try:
            actor = await self._resolve_acting_user()
            changed_at = datetime.now(timezone.utc)

            try:
                await self._colis_store.update_status(previous.id, new_status, changed_at)
            except Exception as exc:
                logger.error("Error updating status of %s: %s", previous.id, exc)
                raise StatusUpdateError(previous.id, new_status, str(exc)) from exc

            try:
                await self._history_store.insert(
                    NewHistoryEntry(
                        colis_id=previous.id,
                        status=new_status,
                        date=changed_at,
                        acting_user_id=actor.id,
                    )
                )
            except Exception as exc:
                logger.error("Error inserting historique for %s: %s", previous.id, exc)
                await self._revert_status(previous)
                raise HistoryInsertError(previous.id, new_status, str(exc)) from exc

            self.colis = previous.model_copy(
                update={"status": new_status, "updated_at": changed_at}
            )
        except Exception:
            self.colis = previous
            raise
        finally:
            self.updating = False

        await asyncio.sleep(self._settings.history_settle_delay)
        await self.refresh_history()
        return self.detail

    async def edit(self, changes: dict[str, Any]) -> ColisDetail:
        """
        Persist field edits.

        A status change inside the edit is applied through update_status so
        it gets its history entry. The status is checked against the catalog,
        and the acting user resolved, before any field is written.

        Raises:
            InvalidStatusError: Status not in the loaded catalog
            ActingUserNotFoundError: Status change cannot be attributed
            ColisEditError: Persisting the field changes failed
            ColisLoadError: The parcel could not be re-read after the write
        """
        colis = self._require_colis()
        changes = dict(changes)
        new_status = changes.pop("status", None)
        if new_status is not None and new_status != colis.status:
            self._validate_status(new_status)
            await self._resolve_acting_user()

        if changes:
            fields = sorted(changes)
            changes["updated_at"] = datetime.now(timezone.utc).isoformat()
            try:
                await self._colis_store.update(colis.id, to_row(changes))
            except Exception as exc:
                logger.error("Error updating colis %s: %s", colis.id, exc)
                raise ColisEditError(colis.id, fields, str(exc)) from exc
            try:
                refreshed = await self._colis_store.get_by_id(colis.id)
            except Exception as exc:
                logger.error("Error re-fetching colis %s after edit: %s", colis.id, exc)
                raise ColisLoadError(colis.id, str(exc)) from exc
            if refreshed is None:
                raise ColisNotFoundError(colis.id)
            self.colis = refreshed

        if new_status is not None:
            return await self.update_status(new_status)
        return self.detail

    async def refresh_history(self) -> list[HistoryEntry]:
        """Re-fetch the history; a failure keeps the current list and is logged."""
        colis = self._require_colis()
        self.refreshing = True
        try:
            self.history = await self._history_store.list_for_colis(
                colis.id, limit=self._settings.history_limit
            )
        except Exception as exc:
            logger.error("Error refreshing historique for %s: %s", colis.id, exc)
        finally:
            self.refreshing = False
        return self.history

    async def delete(self) -> None:
        """
        Delete the parcel and its whole history.

        History goes first so a failed parcel delete never leaves orphaned
        entries behind; if the history delete fails the parcel is kept.

        Raises:
            ColisDeleteError: With ``details["step"]`` naming the failed step
        """
        colis = self._require_colis()
        self.deleting = True
        try:
            try:
                await self._history_store.delete_for_colis(colis.id)
            except Exception as exc:
                logger.error("Error deleting historique for %s: %s", colis.id, exc)
                raise ColisDeleteError(colis.id, "history", str(exc)) from exc

            try:
                await self._colis_store.delete(colis.id)
            except Exception as exc:
                logger.error("Error deleting colis %s: %s", colis.id, exc)
                raise ColisDeleteError(colis.id, "colis", str(exc)) from exc
        finally:
            self.deleting = False

        logger.info("Colis %s deleted", colis.id)
        self.colis = None
        self.history = []

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_colis(self) -> Colis:
        if self.colis is None:
            raise ColisNotLoadedError()
        return self.colis

    def _validate_status(self, status: str) -> None:
        # An empty catalog means none is configured; accept any status
        if not self.statuses:
            return
        allowed = [definition.name for definition in self.statuses]
        if status not in allowed:
            raise InvalidStatusError(status, allowed)

    async def _resolve_acting_user(self) -> UserProfile:
        """
        Durable profile of the signed-in user.

        The session holds the auth identity; history rows reference the
        ``utilisateurs`` id, so the two are cross-referenced here the same
        way the session engine matched them at sign-in.
        """
        session = self._session.state
        auth_id = session.auth_id
        if not session.authenticated:
            raise ActingUserNotFoundError(auth_id)
        try:
            profile = await find_profile(self._profiles, auth_id, session.email)
        except Exception as exc:
            logger.error("Error resolving acting user %s: %s", auth_id, exc)
            raise ActingUserNotFoundError(auth_id) from exc
        if profile is None:
            raise ActingUserNotFoundError(auth_id)
        return profile

    async def _revert_status(self, previous: Colis) -> None:
        """Put the stored status back after a failed history insert."""
        reverted_at = previous.updated_at or datetime.now(timezone.utc)
        try:
            await self._colis_store.update_status(previous.id, previous.status, reverted_at)
        except Exception as exc:
            logger.error(
                "Could not revert status of %s to %s after history failure: %s",
                previous.id, previous.status, exc,
            )
