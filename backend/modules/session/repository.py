"""
Staff profile repository.

Reads the ``utilisateurs`` table. Profiles are keyed by their own id and
cross-referenced to the auth identity through ``auth_id``.
"""

from typing import Any, Optional

from shared.models import UserProfile
from shared.repository import BaseRepository


class ProfileRepository(BaseRepository[UserProfile]):
    """IProfileStore over Supabase."""

    async def get_user_by_id(self, user_id: str) -> Optional[UserProfile]:
        return await self._get_one("id", user_id)

    async def get_user_by_auth_id(self, auth_id: str) -> Optional[UserProfile]:
        return await self._get_one("auth_id", auth_id)

    async def get_user_by_email(self, email: str) -> Optional[UserProfile]:
        return await self._get_one("email", email.strip().lower())

    async def _get_one(self, column: str, value: str) -> Optional[UserProfile]:
        result = await (
            self._db.table("utilisateurs")
            .select("*")
            .eq(column, value)
            .limit(1)
            .execute()
        )
        row = self._first(result.data)
        if row is None:
            return None
        return map_to_profile(row)


def map_to_profile(data: dict[str, Any]) -> UserProfile:
    """Map a ``utilisateurs`` row to a UserProfile."""
    return UserProfile(
        id=str(data["id"]),
        auth_id=str(data["auth_id"]) if data.get("auth_id") else None,
        last_name=data.get("nom") or "",
        first_name=data.get("prenom"),
        email=data.get("email"),
        role=data.get("role") or "Livreur",
        status=data.get("statut"),
    )
