"""
Colis module data models.

A colis (parcel) carries a free-form status drawn from a configurable
catalog and an append-only history of status changes.
"""

import random
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional
from pydantic import BaseModel, Field

from shared.models import UserProfile

SYSTEM_ACTOR_LABEL = "Système"
FALLBACK_BADGE_COLOR = "gray"


class ClientSummary(BaseModel):
    """Client joined onto a parcel."""

    id: str
    name: str = Field(default="", description="Client name (nom)")
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None


class CompanySummary(BaseModel):
    """Partner company (entreprise) joined onto a parcel."""

    id: str
    name: str = Field(default="", description="Company name (nom)")
    contact: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None


class Colis(BaseModel):
    """A trackable parcel."""

    id: str = Field(..., description="Human-assigned parcel code, e.g. COL-2024-001")
    status: str = Field(..., description="Current status (catalog name)")
    price: Decimal = Field(default=Decimal(0), description="Parcel price (prix)")
    fee: Decimal = Field(default=Decimal(0), description="Delivery fee (frais)")
    created_at: datetime = Field(..., description="Creation time")
    updated_at: Optional[datetime] = Field(None, description="Last update time")
    notes: Optional[str] = None
    delivery_address: Optional[str] = None

    client_id: str = Field(..., description="Owning client")
    company_id: Optional[str] = None
    courier_id: Optional[str] = None

    client: Optional[ClientSummary] = None
    company: Optional[CompanySummary] = None
    courier: Optional[UserProfile] = None


class StatusDefinition(BaseModel):
    """An entry of the status catalog."""

    id: str
    name: str = Field(..., description="Status name shown and stored on parcels")
    type: str = Field(default="colis", description="Entity type the status applies to")
    color: Optional[str] = Field(None, description="Display colour (couleur)")
    order: Optional[int] = Field(None, description="Sort order (ordre)")
    active: bool = True


class HistoryEntry(BaseModel):
    """One immutable audit record of a status change."""

    id: str
    colis_id: str
    status: str = Field(..., description="Status transitioned to")
    date: datetime = Field(..., description="Transition time")
    acting_user_id: Optional[str] = Field(None, description="Profile ID of the actor")
    actor_name: Optional[str] = Field(None, description="Resolved actor name")

    model_config = {"frozen": True}

    @property
    def actor_label(self) -> str:
        """Actor name, or the system label when it could not be resolved."""
        return self.actor_name or SYSTEM_ACTOR_LABEL


class NewHistoryEntry(BaseModel):
    """A history entry about to be inserted."""

    colis_id: str
    status: str
    date: datetime
    acting_user_id: str


class StatusBadge(BaseModel):
    """How a status should be displayed."""

    label: str
    color: str
    known: bool


def status_badge(status: str, catalog: list[StatusDefinition]) -> StatusBadge:
    """
    Resolve the display badge for a status.

    Statuses missing from the catalog (renamed or legacy values) still get
    a badge, with the neutral fallback colour.
    """
    for definition in catalog:
        if definition.name == status:
            return StatusBadge(
                label=status,
                color=definition.color or FALLBACK_BADGE_COLOR,
                known=True,
            )
    return StatusBadge(label=status, color=FALLBACK_BADGE_COLOR, known=False)


class ColisDetail(BaseModel):
    """Everything the parcel detail view shows."""

    colis: Colis
    history: list[HistoryEntry] = Field(default_factory=list)
    statuses: list[StatusDefinition] = Field(default_factory=list)
    badge: Optional[StatusBadge] = None


class UpdateStatusRequest(BaseModel):
    """Request to move a parcel to a new status."""

    status: str = Field(..., min_length=1, description="New status name")


class UpdateColisRequest(BaseModel):
    """Partial edit of a parcel's fields."""

    status: Optional[str] = Field(None, min_length=1)
    client_id: Optional[str] = None
    company_id: Optional[str] = None
    courier_id: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    fee: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None
    delivery_address: Optional[str] = None


class CreateColisRequest(BaseModel):
    """Request to create a parcel. The id is suggested when omitted."""

    id: Optional[str] = Field(None, min_length=1, max_length=64)
    client_id: str = Field(..., min_length=1)
    company_id: Optional[str] = None
    courier_id: Optional[str] = None
    status: str = Field(default="En cours", min_length=1)
    price: Decimal = Field(default=Decimal(0), ge=0)
    fee: Decimal = Field(default=Decimal(0), ge=0)
    notes: str = ""
    delivery_address: Optional[str] = None


class SuggestedIdResponse(BaseModel):
    id: str


def suggest_colis_id(
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Suggest a parcel code of the form COL-<year>-<0..9999>."""
    now = now or datetime.now(timezone.utc)
    number = (rng or random).randint(0, 9999)
    return f"COL-{now.year}-{number}"


def to_row(fields: dict[str, Any]) -> dict[str, Any]:
    """Translate model field names to ``colis`` column names."""
    row: dict[str, Any] = {}
    for name, value in fields.items():
        column = COLUMN_NAMES.get(name, name)
        row[column] = float(value) if isinstance(value, Decimal) else value
    return row


COLUMN_NAMES = {
    "status": "statut",
    "price": "prix",
    "fee": "frais",
    "created_at": "date_creation",
    "updated_at": "date_mise_a_jour",
    "delivery_address": "adresse_livraison",
    "company_id": "entreprise_id",
    "courier_id": "livreur_id",
}
