"""
Shared infrastructure for the Haazir access backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase async client factory
- exceptions: Base exception classes

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import create_supabase_client, get_supabase_user_client
from .exceptions import (
    HaazirError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    ExternalServiceError,
)
from .models import AuthenticatedUser, BackendSession

__all__ = [
    "Settings",
    "get_settings",
    "create_supabase_client",
    "get_supabase_user_client",
    "HaazirError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "ExternalServiceError",
    "AuthenticatedUser",
    "BackendSession",
]
