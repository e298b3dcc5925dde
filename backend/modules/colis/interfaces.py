"""
Colis module interfaces.

The tracker reaches the hosted data store only through these protocols,
which keeps it testable with in-memory fakes.
"""

from datetime import datetime
from typing import Any, Optional, Protocol, runtime_checkable

from .models import Colis, HistoryEntry, NewHistoryEntry, StatusDefinition


@runtime_checkable
class IColisStore(Protocol):
    """Parcel persistence."""

    async def get_by_id(self, colis_id: str) -> Optional[Colis]:
        """Parcel with its client, company and courier, or None."""
        ...

    async def create(self, data: dict[str, Any]) -> Colis:
        ...

    async def update(self, colis_id: str, fields: dict[str, Any]) -> None:
        ...

    async def update_status(self, colis_id: str, status: str, updated_at: datetime) -> None:
        ...

    async def delete(self, colis_id: str) -> None:
        ...


@runtime_checkable
class IHistoryStore(Protocol):
    """Status history persistence."""

    async def insert(self, entry: NewHistoryEntry) -> None:
        ...

    async def list_for_colis(self, colis_id: str, limit: int = 20) -> list[HistoryEntry]:
        """Most recent entries first."""
        ...

    async def delete_for_colis(self, colis_id: str) -> None:
        ...


@runtime_checkable
class IStatusCatalog(Protocol):
    """Configurable status catalog."""

    async def get_active(self, status_type: str) -> list[StatusDefinition]:
        """Active statuses for an entity type, in display order."""
        ...
