"""
Colis repositories for database access.

Encapsulates all Supabase queries and data mapping for parcel-related tables:
- colis
- historique_colis
- statuts
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from shared.repository import BaseRepository
from modules.session.repository import map_to_profile

from .models import (
    ClientSummary,
    Colis,
    CompanySummary,
    HistoryEntry,
    NewHistoryEntry,
    StatusDefinition,
)

COLIS_SELECT = """
    *,
    client:clients(*),
    entreprise:entreprises(*),
    livreur:utilisateurs(*)
"""

HISTORY_SELECT = """
    id,
    colis_id,
    date,
    statut,
    utilisateur,
    user:utilisateurs(nom, prenom)
"""


class ColisRepository(BaseRepository[Colis]):
    """
    Repository for parcel data access.

    Note: This repository does NOT check permissions; row-level security on
    the hosted store applies to the signed-in user.
    """

    async def get_by_id(self, colis_id: str) -> Optional[Colis]:
        """
        Get a parcel with its client, company and courier.

        Returns:
            The parcel, or None if no row matches.
        """
        result = await (
            self._db.table("colis")
            .select(COLIS_SELECT)
            .eq("id", colis_id)
            .limit(1)
            .execute()
        )
        row = self._first(result.data)
        if row is None:
            return None
        return self._map_to_colis(row)

    async def create(self, data: dict[str, Any]) -> Colis:
        """
        Insert a parcel.

        Args:
            data: Column values (already translated to column names).
        """
        result = await self._db.table("colis").insert(data).execute()
        return self._map_to_colis(result.data[0])

    async def update(self, colis_id: str, fields: dict[str, Any]) -> None:
        await self._db.table("colis").update(fields).eq("id", colis_id).execute()

    async def update_status(self, colis_id: str, status: str, updated_at: datetime) -> None:
        """Persist a new status together with the update timestamp."""
        data = {
            "statut": status,
            "date_mise_a_jour": updated_at.isoformat(),
        }
        await self._db.table("colis").update(data).eq("id", colis_id).execute()

    async def delete(self, colis_id: str) -> None:
        await self._db.table("colis").delete().eq("id", colis_id).execute()

    # -------------------------------------------------------------------------
    # Private mapping methods
    # -------------------------------------------------------------------------

    def _map_to_colis(self, data: dict[str, Any]) -> Colis:
        """Map a ``colis`` row (with optional joins) to a Colis model."""
        client = data.get("client")
        company = data.get("entreprise")
        courier = data.get("livreur")

        return Colis(
            id=str(data["id"]),
            status=data["statut"],
            price=Decimal(str(data.get("prix") or 0)),
            fee=Decimal(str(data.get("frais") or 0)),
            created_at=data["date_creation"],
            updated_at=data.get("date_mise_a_jour"),
            notes=data.get("notes"),
            delivery_address=data.get("adresse_livraison"),
            client_id=str(data["client_id"]),
            company_id=_optional_str(data.get("entreprise_id")),
            courier_id=_optional_str(data.get("livreur_id")),
            client=self._map_to_client(client) if client else None,
            company=self._map_to_company(company) if company else None,
            courier=map_to_profile(courier) if courier else None,
        )

    def _map_to_client(self, data: dict[str, Any]) -> ClientSummary:
        return ClientSummary(
            id=str(data["id"]),
            name=data.get("nom") or "",
            phone=data.get("telephone"),
            email=data.get("email"),
            address=data.get("adresse"),
            city=data.get("ville"),
        )

    def _map_to_company(self, data: dict[str, Any]) -> CompanySummary:
        return CompanySummary(
            id=str(data["id"]),
            name=data.get("nom") or "",
            contact=data.get("contact"),
            phone=data.get("telephone"),
            email=data.get("email"),
            address=data.get("adresse"),
        )


class HistoryRepository(BaseRepository[HistoryEntry]):
    """Repository for the ``historique_colis`` audit trail."""

    async def insert(self, entry: NewHistoryEntry) -> None:
        data = {
            "colis_id": entry.colis_id,
            "statut": entry.status,
            "date": entry.date.isoformat(),
            "utilisateur": entry.acting_user_id,
        }
        await self._db.table("historique_colis").insert(data).execute()

    async def list_for_colis(self, colis_id: str, limit: int = 20) -> list[HistoryEntry]:
        """
        Most recent history entries for a parcel, newest first.

        Args:
            colis_id: The parcel code.
            limit: Maximum number of entries to return.
        """
        result = await (
            self._db.table("historique_colis")
            .select(HISTORY_SELECT)
            .eq("colis_id", colis_id)
            .order("date", desc=True)
            .limit(limit)
            .execute()
        )
        return [self._map_to_entry(row, colis_id) for row in result.data or []]

    async def delete_for_colis(self, colis_id: str) -> None:
        await self._db.table("historique_colis").delete().eq("colis_id", colis_id).execute()

    def _map_to_entry(self, data: dict[str, Any], colis_id: str) -> HistoryEntry:
        user = data.get("user")
        actor_name = None
        if user:
            actor_name = f"{user.get('prenom') or ''} {user.get('nom') or ''}".strip() or None

        return HistoryEntry(
            id=str(data["id"]),
            colis_id=str(data.get("colis_id") or colis_id),
            status=data["statut"],
            date=data["date"],
            acting_user_id=_optional_str(data.get("utilisateur")),
            actor_name=actor_name,
        )


class StatusCatalogRepository(BaseRepository[StatusDefinition]):
    """Repository for the ``statuts`` catalog."""

    async def get_active(self, status_type: str) -> list[StatusDefinition]:
        result = await (
            self._db.table("statuts")
            .select("id, nom, type, couleur, ordre, actif")
            .eq("actif", True)
            .eq("type", status_type)
            .order("ordre")
            .execute()
        )
        return [
            StatusDefinition(
                id=str(row["id"]),
                name=row["nom"],
                type=row.get("type") or status_type,
                color=row.get("couleur"),
                order=row.get("ordre"),
                active=row.get("actif", True),
            )
            for row in result.data or []
        ]


def _optional_str(value: Any) -> Optional[str]:
    return str(value) if value is not None and value != "" else None
