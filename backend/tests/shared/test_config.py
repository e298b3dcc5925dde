"""Tests for shared/config.py."""

import pytest
from unittest.mock import patch
import os

from shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        settings = Settings()
        assert settings.app_name == "LogiTrack API"
        assert settings.debug is False
        assert settings.port == 8000
        assert settings.host == "127.0.0.1"
        assert settings.app_version == "0.1.0"
        assert settings.log_level == "INFO"

    def test_session_timing_defaults(self):
        """Session tuning values match the documented ceilings."""
        settings = Settings()
        assert settings.session_probe_timeout == 10.0
        assert settings.logout_timeout == 3.0
        assert settings.sign_in_event_timeout == 5.0
        assert settings.auth_event_dedupe_window == 2.0
        assert settings.profile_retry_attempts == 3

    def test_tracking_defaults(self):
        settings = Settings()
        assert settings.history_limit == 20
        assert settings.history_settle_delay == 0.3
        assert settings.colis_status_type == "colis"

    def test_loads_from_env(self):
        """Settings should load from environment variables."""
        with patch.dict(os.environ, {"DEBUG": "true", "PORT": "9000", "HISTORY_LIMIT": "50"}):
            settings = Settings()
            assert settings.debug is True
            assert settings.port == 9000
            assert settings.history_limit == 50

    def test_loads_supabase_config_from_env(self):
        """Settings should load Supabase configuration from environment variables."""
        with patch.dict(os.environ, {
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_ANON_KEY": "test-anon-key",
        }):
            settings = Settings()
            assert settings.supabase_url == "https://test.supabase.co"
            assert settings.supabase_anon_key == "test-anon-key"

    def test_env_is_case_insensitive(self):
        with patch.dict(os.environ, {"session_probe_timeout": "4.5"}):
            assert Settings().session_probe_timeout == 4.5


class TestGetSettings:
    def test_get_settings_returns_settings_instance(self):
        """get_settings should return a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_get_settings_is_cached(self):
        """get_settings should return the same instance."""
        get_settings.cache_clear()
        assert get_settings() is get_settings()
