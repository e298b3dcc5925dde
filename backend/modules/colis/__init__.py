"""
Colis module.

Parcel detail workflow: status changes with an attributed, append-only
history, cascade delete, and parcel creation.

Public API:
- ColisTracker: View-scoped parcel state and status workflow
- ColisService: Tracker factory and parcel creation
- IColisStore, IHistoryStore, IStatusCatalog: Store interfaces
- Colis, HistoryEntry, StatusDefinition, ColisDetail: Data models
- Colis exceptions: ColisNotFoundError, ActingUserNotFoundError, etc.
"""

from .interfaces import IColisStore, IHistoryStore, IStatusCatalog
from .models import (
    Colis,
    ColisDetail,
    HistoryEntry,
    StatusBadge,
    StatusDefinition,
    status_badge,
    suggest_colis_id,
)
from .tracker import ColisTracker
from .service import ColisService
from .exceptions import (
    ColisError,
    ColisStoreError,
    ColisNotFoundError,
    ColisLoadError,
    InvalidStatusError,
    ActingUserNotFoundError,
    StatusUpdateError,
    HistoryInsertError,
    ColisDeleteError,
    ColisCreateError,
    ColisEditError,
)

__all__ = [
    # Interfaces
    "IColisStore",
    "IHistoryStore",
    "IStatusCatalog",
    # Services
    "ColisTracker",
    "ColisService",
    # Models
    "Colis",
    "ColisDetail",
    "HistoryEntry",
    "StatusBadge",
    "StatusDefinition",
    "status_badge",
    "suggest_colis_id",
    # Exceptions
    "ColisError",
    "ColisStoreError",
    "ColisNotFoundError",
    "ColisLoadError",
    "InvalidStatusError",
    "ActingUserNotFoundError",
    "StatusUpdateError",
    "HistoryInsertError",
    "ColisDeleteError",
    "ColisCreateError",
    "ColisEditError",
]
