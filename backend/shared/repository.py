"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and providing shared utilities for data operations.
"""

from typing import Any, TypeVar, Generic
from supabase import AsyncClient


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class ColisRepository(BaseRepository[Colis]):
            async def get_by_id(self, colis_id: str) -> Optional[Colis]:
                result = await self._db.table("colis").select("*").eq("id", colis_id).execute()
                row = self._first(result.data)
                return self._map_to_colis(row) if row else None
    """

    def __init__(self, db: AsyncClient) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    @staticmethod
    def _first(rows: Any) -> dict[str, Any] | None:
        """Return the first row of a PostgREST result, or None if empty."""
        if not rows:
            return None
        return rows[0]
