"""Tests for shared/config.py."""

import pytest
from unittest.mock import patch
import os

from shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        settings = Settings()
        assert settings.app_name == "Haazir Access API"
        assert settings.app_version == "0.1.0"
        assert settings.debug is False
        assert settings.identity_bridge_domain == "fasthaazir.app"
        assert settings.default_country_code == "92"

    def test_role_resolution_defaults(self):
        """Retry and timeout budgets should match the login flow's expectations."""
        settings = Settings()
        assert settings.role_lookup_attempts == 3
        assert settings.role_lookup_retry_delay_seconds == 0.5
        assert settings.role_resolution_timeout_seconds == 12.0
        assert settings.identity_bridge_timeout_seconds == 15.0

    def test_route_defaults(self):
        settings = Settings()
        assert settings.login_path == "/login"
        assert settings.account_status_path == "/account-status"
        assert settings.route_policies["/admin-dashboard"] == ["admin"]
        assert settings.route_policies["/rider-dashboard"] == ["rider"]

    def test_loads_from_env(self):
        """Settings should load from environment variables."""
        with patch.dict(os.environ, {
            "DEBUG": "true",
            "ROLE_LOOKUP_ATTEMPTS": "5",
            "IDENTITY_BRIDGE_SECRET": "bridge-secret",
        }):
            settings = Settings()
            assert settings.debug is True
            assert settings.role_lookup_attempts == 5
            assert settings.identity_bridge_secret == "bridge-secret"

    def test_loads_supabase_config_from_env(self):
        """Settings should load Supabase configuration from environment variables."""
        with patch.dict(os.environ, {
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_ANON_KEY": "test-anon-key",
            "SUPABASE_JWT_SECRET": "test-jwt-secret",
        }):
            settings = Settings()
            assert settings.supabase_url == "https://test.supabase.co"
            assert settings.supabase_anon_key == "test-anon-key"
            assert settings.supabase_jwt_secret == "test-jwt-secret"

    def test_loads_route_policies_from_env(self):
        """Complex settings are read as JSON."""
        with patch.dict(os.environ, {"ROUTE_POLICIES": '{"/ops": ["admin"]}'}):
            settings = Settings()
            assert settings.route_policies == {"/ops": ["admin"]}


class TestGetSettings:
    def test_get_settings_returns_settings_instance(self):
        """get_settings should return a Settings instance."""
        # Clear the cache first
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_get_settings_caches(self):
        """get_settings should return cached instance."""
        # Clear the cache first
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2
