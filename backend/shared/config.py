"""
Centralized configuration for the Haazir access backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings are namespaced (e.g., SUPABASE_*, IDENTITY_BRIDGE_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Haazir Access API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Supabase (backend session service)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_jwt_secret: str = ""

    # External identity provider (phone OTP / email)
    firebase_project_id: str = ""
    firebase_jwks_url: str = (
        "https://www.googleapis.com/service_accounts/v1/jwk/"
        "securetoken@system.gserviceaccount.com"
    )

    # Identity bridge
    identity_bridge_domain: str = "fasthaazir.app"
    identity_bridge_secret: str = ""
    identity_bridge_timeout_seconds: float = 15.0
    default_country_code: str = "92"

    # Role resolution
    role_lookup_attempts: int = 3
    role_lookup_retry_delay_seconds: float = 0.5
    role_resolution_timeout_seconds: float = 12.0

    # Routing
    login_path: str = "/login"
    account_status_path: str = "/account-status"
    admin_home_path: str = "/admin-dashboard"
    rider_home_path: str = "/rider-dashboard"
    customer_home_path: str = "/home"
    route_policies: dict[str, list[str]] = {
        "/admin-dashboard": ["admin"],
        "/rider-dashboard": ["rider"],
        "/home": ["customer"],
        "/orders": ["customer"],
        "/profile": ["customer", "rider", "admin"],
    }


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
