"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone

from api.dependencies import reset_container
from shared.config import Settings, get_settings
from shared.database import reset_client_cache
from shared.models import UserProfile, UserRole
from modules.session.models import AuthIdentity
from modules.colis.models import Colis, StatusDefinition


TEST_AUTH_ID = "auth-uuid-123"
TEST_PROFILE_ID = "user-42"
TEST_EMAIL = "marie.dupont@logitrack.test"
TEST_PASSWORD = "correct-horse"


def make_profile(
    profile_id: str = TEST_PROFILE_ID,
    auth_id: str = TEST_AUTH_ID,
    email: str = TEST_EMAIL,
    first_name: str = "Marie",
    last_name: str = "Dupont",
    role: str = "Gestionnaire",
) -> UserProfile:
    """Build a staff profile as stored in ``utilisateurs``."""
    return UserProfile(
        id=profile_id,
        auth_id=auth_id,
        email=email,
        first_name=first_name,
        last_name=last_name,
        role=role,
        status="Actif",
    )


def make_colis(
    colis_id: str = "COL-2024-001",
    status: str = "En cours",
    **overrides,
) -> Colis:
    """Build a parcel with sensible defaults."""
    data = {
        "id": colis_id,
        "status": status,
        "price": "150.00",
        "fee": "10.00",
        "created_at": datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc),
        "client_id": "client-1",
        "notes": "Fragile",
    }
    data.update(overrides)
    return Colis(**data)


def make_catalog(*names: str) -> list[StatusDefinition]:
    """Build an active ``colis`` status catalog in the given order."""
    colors = ["blue", "yellow", "green", "red", "purple"]
    return [
        StatusDefinition(
            id=f"status-{index}",
            name=name,
            type="colis",
            color=colors[index % len(colors)],
            order=index,
        )
        for index, name in enumerate(names)
    ]


DEFAULT_STATUSES = ("En cours", "En livraison", "Livré", "Retourné")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings, client and container before and after each test."""
    get_settings.cache_clear()
    reset_client_cache()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_client_cache()
    reset_container()


@pytest.fixture
def settings() -> Settings:
    """Settings with short timeouts so timing tests run fast."""
    return Settings(
        supabase_url="https://test.supabase.co",
        supabase_anon_key="test-anon-key",
        session_probe_timeout=0.2,
        logout_timeout=0.2,
        sign_in_event_timeout=0.2,
        auth_event_dedupe_window=2.0,
        profile_retry_attempts=3,
        profile_retry_backoff=0.0,
        history_limit=20,
        history_settle_delay=0.0,
    )


@pytest.fixture
def profile() -> UserProfile:
    return make_profile()


@pytest.fixture
def identity() -> AuthIdentity:
    return AuthIdentity(id=TEST_AUTH_ID, email=TEST_EMAIL)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
