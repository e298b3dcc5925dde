"""
Colis module exceptions.
"""

from typing import Optional

from shared.exceptions import (
    AuthorizationError,
    DataStoreError,
    LogitrackError,
    NotFoundError,
    ValidationError,
)


class ColisError(LogitrackError):
    """Base exception for parcel-related errors."""

    pass


class ColisStoreError(ColisError, DataStoreError):
    """A parcel, history or catalog call to the data store failed."""

    pass


class ColisNotFoundError(NotFoundError):
    """Raised when a parcel is not found."""

    def __init__(self, colis_id: str):
        super().__init__(
            f"Colis not found: {colis_id}",
            code="COLIS_NOT_FOUND",
            details={"colis_id": colis_id},
        )


class ColisLoadError(ColisStoreError):
    """Raised when the parcel view cannot be loaded."""

    operation = "load"

    def __init__(self, colis_id: str, reason: str):
        super().__init__(
            f"Impossible de charger les données du colis {colis_id}: {reason}",
            code="COLIS_LOAD_FAILED",
            details={"colis_id": colis_id, "reason": reason},
        )


class ColisNotLoadedError(ColisError):
    """Raised when a tracker operation runs before load()."""

    def __init__(self):
        super().__init__("No colis loaded", code="COLIS_NOT_LOADED")


class InvalidStatusError(ValidationError):
    """Raised when a status is not part of the active catalog."""

    def __init__(self, status: str, allowed: list[str]):
        super().__init__(
            f"Unknown status: {status}",
            code="INVALID_STATUS",
            details={"status": status, "allowed": allowed},
        )


class ActingUserNotFoundError(AuthorizationError):
    """Raised when the current session cannot be tied to a staff profile."""

    def __init__(self, auth_id: Optional[str]):
        super().__init__(
            "Current user not found in utilisateurs table. "
            "Please contact administrator to create your user profile.",
            code="ACTING_USER_NOT_FOUND",
            details={"auth_id": auth_id},
        )


class StatusUpdateError(ColisStoreError):
    """Raised when persisting a status change fails."""

    operation = "update_status"

    def __init__(self, colis_id: str, status: str, reason: str):
        super().__init__(
            f"Impossible de mettre à jour le statut du colis {colis_id}: {reason}",
            code="STATUS_UPDATE_FAILED",
            details={"colis_id": colis_id, "status": status, "reason": reason},
        )


class HistoryInsertError(ColisStoreError):
    """Raised when the history entry for a status change cannot be written."""

    operation = "insert_history"

    def __init__(self, colis_id: str, status: str, reason: str):
        super().__init__(
            f"Failed to insert historique for colis {colis_id}: {reason}",
            code="HISTORY_INSERT_FAILED",
            details={"colis_id": colis_id, "status": status, "reason": reason},
        )


class ColisDeleteError(ColisStoreError):
    """Raised when a cascade delete step fails; nothing past it was deleted."""

    operation = "delete"

    def __init__(self, colis_id: str, step: str, reason: str):
        messages = {
            "history": "Erreur lors de la suppression de l'historique",
            "colis": "Erreur lors de la suppression du colis",
        }
        super().__init__(
            messages.get(step, "Impossible de supprimer le colis"),
            code="COLIS_DELETE_FAILED",
            details={"colis_id": colis_id, "step": step, "reason": reason},
        )


class ColisCreateError(ColisStoreError):
    """Raised when a parcel cannot be created."""

    operation = "create"

    def __init__(self, colis_id: str, reason: str):
        super().__init__(
            f"Impossible de créer le colis {colis_id}: {reason}",
            code="COLIS_CREATE_FAILED",
            details={"colis_id": colis_id, "reason": reason},
        )


class ColisEditError(ColisStoreError):
    """Raised when persisting field edits on a parcel fails."""

    operation = "edit"

    def __init__(self, colis_id: str, fields: list[str], reason: str):
        super().__init__(
            f"Impossible de modifier le colis {colis_id}: {reason}",
            code="COLIS_EDIT_FAILED",
            details={"colis_id": colis_id, "fields": fields, "reason": reason},
        )
