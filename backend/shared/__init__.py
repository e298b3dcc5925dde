"""
Shared infrastructure for the LogiTrack backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- models: Staff profile shared by the session and parcel modules

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, reset_client_cache
from .exceptions import (
    LogitrackError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ConnectivityError,
    DataStoreError,
)
from .models import UserProfile, UserRole

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "reset_client_cache",
    "LogitrackError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ConnectivityError",
    "DataStoreError",
    "UserProfile",
    "UserRole",
]
