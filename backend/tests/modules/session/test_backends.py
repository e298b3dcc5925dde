"""Tests for the Supabase auth backend adapter."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from modules.session.backends import SupabaseAuthBackend
from modules.session.exceptions import InvalidCredentialsError
from modules.session.interfaces import IAuthBackend
from modules.session.models import AuthIdentity


def create_auth_client():
    client = MagicMock()
    client.auth.sign_in_with_password = AsyncMock()
    client.auth.sign_out = AsyncMock()
    client.auth.get_session = AsyncMock()
    return client


def create_user(user_id: str = "auth-uuid-123", email: str = "marie@logitrack.test"):
    user = MagicMock()
    user.id = user_id
    user.email = email
    return user


class TestSupabaseAuthBackend:
    def test_implements_interface(self):
        assert isinstance(SupabaseAuthBackend(create_auth_client()), IAuthBackend)

    @pytest.mark.asyncio
    async def test_sign_in_returns_identity(self):
        """Sign-in passes the credentials and returns the auth identity."""
        client = create_auth_client()
        client.auth.sign_in_with_password.return_value = MagicMock(user=create_user())

        identity = await SupabaseAuthBackend(client).sign_in("marie@logitrack.test", "secret")

        client.auth.sign_in_with_password.assert_awaited_once_with(
            {"email": "marie@logitrack.test", "password": "secret"}
        )
        assert identity == AuthIdentity(id="auth-uuid-123", email="marie@logitrack.test")

    @pytest.mark.asyncio
    async def test_sign_in_without_user_is_rejected(self):
        """A response without a user is treated as invalid credentials."""
        client = create_auth_client()
        client.auth.sign_in_with_password.return_value = MagicMock(user=None)
        with pytest.raises(InvalidCredentialsError):
            await SupabaseAuthBackend(client).sign_in("marie@logitrack.test", "secret")

    @pytest.mark.asyncio
    async def test_get_session(self):
        """An existing session yields its user's identity."""
        client = create_auth_client()
        client.auth.get_session.return_value = MagicMock(user=create_user())
        identity = await SupabaseAuthBackend(client).get_session()
        assert identity.id == "auth-uuid-123"

    @pytest.mark.asyncio
    async def test_get_session_none(self):
        """No stored session yields None."""
        client = create_auth_client()
        client.auth.get_session.return_value = None
        assert await SupabaseAuthBackend(client).get_session() is None

    @pytest.mark.asyncio
    async def test_sign_out(self):
        client = create_auth_client()
        await SupabaseAuthBackend(client).sign_out()
        client.auth.sign_out.assert_awaited_once()

    def test_auth_events_are_forwarded(self):
        """Backend events reach the callback as (event, identity)."""
        client = create_auth_client()
        subscription = MagicMock()
        client.auth.on_auth_state_change.return_value = subscription
        received = []

        unsubscribe = SupabaseAuthBackend(client).on_auth_state_change(
            lambda event, identity: received.append((event, identity))
        )
        forward = client.auth.on_auth_state_change.call_args[0][0]
        forward("SIGNED_IN", MagicMock(user=create_user()))
        forward("SIGNED_OUT", None)

        assert received == [
            ("SIGNED_IN", AuthIdentity(id="auth-uuid-123", email="marie@logitrack.test")),
            ("SIGNED_OUT", None),
        ]
        assert unsubscribe is subscription.unsubscribe
