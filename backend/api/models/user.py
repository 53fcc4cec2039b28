"""
Token models for authentication.

These models represent the claims of a Supabase access token.
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional


class TokenPayload(BaseModel):
    """JWT token payload structure."""
    model_config = ConfigDict(extra="ignore")  # Ignore extra fields from JWT

    sub: str  # User ID
    email: Optional[str] = None
    phone: Optional[str] = None  # Empty string for e-mail accounts
    aud: str  # Audience
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
    user_metadata: dict = {}
