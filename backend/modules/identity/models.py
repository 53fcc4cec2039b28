"""
Identity module data models.
"""

from typing import Optional
from pydantic import BaseModel, Field, model_validator

from shared.models import BackendSession
from modules.roles.models import RoleResolution


class ExternalIdentity(BaseModel):
    """
    An identity already verified by the external provider (phone OTP or
    e-mail). Nothing here is trusted unless it came from a verified token.
    """

    model_config = {"frozen": True}

    phone: Optional[str] = Field(None, description="Verified phone number")
    email: Optional[str] = Field(None, description="Verified e-mail")
    subject: Optional[str] = Field(None, description="Provider user ID")

    @model_validator(mode="after")
    def _require_identifier(self) -> "ExternalIdentity":
        if not self.phone and not self.email:
            raise ValueError("an external identity needs a phone number or an email")
        return self

    @property
    def preferred_identifier(self) -> str:
        """Phone over e-mail, matching the gate's lookup precedence."""
        return self.phone or self.email or ""


class SyntheticCredential(BaseModel):
    """
    Deterministic backend credential derived from one external identifier.

    Derived on demand and never stored.
    """

    model_config = {"frozen": True}

    kind: str = Field(..., description="'phone' or 'email'")
    identifier: str = Field(..., description="Normalized phone digits or e-mail")
    email: str = Field(..., description="Synthetic sign-in address")
    password: str = Field(..., repr=False)

    @property
    def metadata(self) -> dict[str, str]:
        """User metadata stored on account creation."""
        return {self.kind: self.identifier}


class LoginResult(BaseModel):
    """Outcome of a completed login."""

    model_config = {"frozen": True}

    session: BackendSession
    resolution: RoleResolution
    landing_path: str


class BridgeResponse(BaseModel):
    """Response body for a completed identity bridge."""

    user_id: str
    access_token: str
    refresh_token: Optional[str] = None
    resolution: RoleResolution
    landing_path: str

    @classmethod
    def from_result(cls, result: LoginResult) -> "BridgeResponse":
        return cls(
            user_id=result.session.user_id,
            access_token=result.session.access_token,
            refresh_token=result.session.refresh_token,
            resolution=result.resolution,
            landing_path=result.landing_path,
        )
