"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """
    Represents a caller holding a valid backend access token.

    This model is populated from the Supabase JWT claims and made available
    to route handlers via dependency injection. It says who holds the
    session, never what they may do: roles come from the resolution engine.
    """

    id: str = Field(..., description="Backend user ID (UUID from Supabase)")
    access_token: str = Field(..., repr=False, description="Raw bearer token")
    email: Optional[str] = Field(None, description="Backend account e-mail")
    phone: Optional[str] = Field(None, description="Backend account phone")
    user_metadata: dict = Field(default_factory=dict)
    last_sign_in: Optional[datetime] = Field(None, description="Token issue time")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",  # Ignore extra fields from JWT
    }


class BackendSession(BaseModel):
    """
    An active session on the backend session service.

    phone and email hold the caller's real identifiers, never the synthetic
    address the identity bridge signs in with.
    """

    user_id: str = Field(..., description="Backend user ID")
    access_token: str = Field(..., repr=False)
    refresh_token: Optional[str] = Field(None, repr=False)
    phone: Optional[str] = None
    email: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def identifier_hint(self) -> Optional[str]:
        """
        Best identifier for role lookups.

        Phone wins over e-mail: phone-only accounts can carry placeholder
        e-mails that would resolve to the wrong record.
        """
        return self.phone or self.email
