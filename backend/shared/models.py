"""
Shared data models used across modules.

These models are shared infrastructure, not business logic. The staff
profile is read by the session engine (to resolve who is logged in) and by
the parcel tracker (to attribute history entries), so it lives here.
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator


class UserRole(str, Enum):
    """Staff roles."""

    ADMINISTRATOR = "administrator"
    MANAGER = "manager"
    COURIER = "courier"

    @classmethod
    def parse(cls, value: Any) -> "UserRole":
        """Parse a role from either its value or the stored French label."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key in _ROLE_LABELS:
            return _ROLE_LABELS[key]
        return cls(key)


_ROLE_LABELS = {
    "admin": UserRole.ADMINISTRATOR,
    "administrateur": UserRole.ADMINISTRATOR,
    "gestionnaire": UserRole.MANAGER,
    "livreur": UserRole.COURIER,
}


class UserProfile(BaseModel):
    """
    Application-level staff profile (a row of ``utilisateurs``).

    Keyed independently from the authentication identity; ``auth_id`` is
    the cross-reference to the auth user.
    """

    id: str = Field(..., description="Profile ID")
    auth_id: Optional[str] = Field(None, description="Auth identity ID")
    last_name: str = Field(default="", description="Family name (nom)")
    first_name: Optional[str] = Field(None, description="Given name (prenom)")
    email: Optional[str] = Field(None, description="Email address")
    role: UserRole = Field(default=UserRole.COURIER, description="Staff role")
    status: Optional[str] = Field(None, description="Account status (statut)")

    model_config = {"frozen": True}

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, value: Any) -> UserRole:
        return UserRole.parse(value)

    @property
    def display_name(self) -> str:
        """First and last name, as shown in the header and history."""
        return f"{self.first_name or ''} {self.last_name}".strip()
