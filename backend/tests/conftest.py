"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
from typing import Optional
import jwt  # PyJWT

from api.dependencies import reset_container
from shared.config import get_settings


# Test JWT secret (only for testing - matches test_auth.py)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def create_test_token(
    user_id: str = "test-user-123",
    email: Optional[str] = "phone_923001234567@fasthaazir.app",
    phone: str = "",
    user_metadata: Optional[dict] = None,
    expired: bool = False,
) -> str:
    """
    Create a Supabase-style access token for authentication.

    Args:
        user_id: User ID to include in the token
        email: Backend account e-mail (synthetic for bridged accounts)
        phone: Backend account phone
        user_metadata: Metadata stored at sign-up
        expired: If True, creates an expired token

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "phone": phone,
        "user_metadata": user_metadata if user_metadata is not None else {"phone": "923001234567"},
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the settings cache and service container around each test."""
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def auth_token(test_user_id: str) -> str:
    """Create a valid access token for a phone-bridged account."""
    return create_test_token(user_id=test_user_id)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}
