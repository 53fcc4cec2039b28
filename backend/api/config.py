"""
API server configuration using Pydantic Settings.

Only the HTTP server lives here; backend, identity and routing settings
are in shared.config.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """API server settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="HAAZIR_",
        case_sensitive=False,
        extra="ignore",
    )

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    reload: bool = False
    log_level: str = "INFO"

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]


@lru_cache
def get_settings() -> APISettings:
    """Get cached settings instance."""
    return APISettings()
