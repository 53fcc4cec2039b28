"""
Roles module data models.

RoleResolution is the single output of the resolution engine. The row models
are the typed shapes the role service client hands back, whatever the
backend's transport shape was.
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class Role(str, Enum):
    """Closed set of marketplace roles."""

    ADMIN = "admin"
    RIDER = "rider"
    BUSINESS = "business"  # Legacy, admin-managed
    CUSTOMER = "customer"


class RiderStatus(str, Enum):
    """Rider verification status."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"
    NONE = "none"  # No rider profile yet


_RIDER_STATUS_ALIASES = {
    "approved": RiderStatus.VERIFIED,
    "verified": RiderStatus.VERIFIED,
    "pending": RiderStatus.PENDING,
    "rejected": RiderStatus.REJECTED,
}


def normalize_role(raw: Any) -> Role:
    """
    Map a raw backend role value into the closed Role set.

    Anything unrecognized (including non-strings) becomes CUSTOMER.
    """
    if isinstance(raw, Role):
        return raw
    if not isinstance(raw, str):
        return Role.CUSTOMER
    try:
        return Role(raw.strip().lower())
    except ValueError:
        return Role.CUSTOMER


def normalize_rider_status(raw: Any) -> RiderStatus:
    """Map a stored verification status; missing or unknown means pending."""
    if isinstance(raw, str):
        return _RIDER_STATUS_ALIASES.get(raw.strip().lower(), RiderStatus.PENDING)
    return RiderStatus.PENDING


class RoleResolution(BaseModel):
    """
    Who the caller is, as far as authorization is concerned.

    Produced fresh on every resolution call and never mutated afterwards.
    """

    model_config = {"frozen": True}

    role: Role
    rider_status: Optional[RiderStatus] = None
    is_blocked: bool = False
    needs_registration: bool = False

    @model_validator(mode="after")
    def _check_invariants(self) -> "RoleResolution":
        if self.role is not Role.RIDER and self.rider_status is not None:
            raise ValueError("rider_status is only defined for riders")
        if self.is_blocked and self.needs_registration:
            raise ValueError("a resolution cannot be both blocked and pending registration")
        return self

    @classmethod
    def default_customer(cls) -> "RoleResolution":
        """Least-privilege result used when nothing better is known."""
        return cls(role=Role.CUSTOMER)

    @classmethod
    def rider_needs_registration(cls) -> "RoleResolution":
        return cls(
            role=Role.RIDER,
            rider_status=RiderStatus.NONE,
            is_blocked=False,
            needs_registration=True,
        )


class _BackendRow(BaseModel):
    """Backend rows store unset flags as NULL; NULL reads as false."""

    model_config = {"extra": "ignore"}

    @field_validator("is_blocked", "needs_registration", mode="before", check_fields=False)
    @classmethod
    def _null_flag_is_false(cls, value: Any) -> Any:
        return False if value is None else value


class SelfRoleRow(_BackendRow):
    """Row returned by the caller-scoped resolve_my_role procedure."""

    role: Any = None
    is_blocked: bool = False
    needs_registration: bool = False


class IdentifierRoleRow(_BackendRow):
    """Row returned by resolve_role_by_phone / resolve_role_by_email."""

    role: Any = None
    is_blocked: bool = False


class UserRecord(_BackendRow):
    """Direct read of the user's profile record."""

    role: Any = None
    is_blocked: bool = False


class RiderRecord(BaseModel):
    """Direct read of the rider detail record."""

    model_config = {"extra": "ignore"}

    verification_status: Optional[str] = Field(None, description="Raw status")
    is_active: Optional[bool] = Field(None, description="Active flag")

    @property
    def status(self) -> RiderStatus:
        return normalize_rider_status(self.verification_status)

    @property
    def deactivated(self) -> bool:
        return self.is_active is False
