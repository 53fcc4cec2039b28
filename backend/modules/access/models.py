"""
Access module data models.

AuthState is the gate's private view of the caller; GateDecision is what the
router does with it.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from modules.roles.models import RiderStatus, Role


class GateStatus(str, Enum):
    """Gate state machine states."""

    LOADING = "loading"                        # Initial, and after every session change
    UNAUTHENTICATED = "unauthenticated"        # No session, or resolution failed
    UNAUTHORIZED = "unauthorized"              # Signed in, wrong role for the route
    AUTHORIZED = "authorized"                  # Signed in, allowed
    BLOCKED = "blocked"                        # Blocked account or rejected rider
    NEEDS_REGISTRATION = "needs_registration"  # Rider without a completed profile


class GateUser(BaseModel):
    """The resolved caller, as the gate records it."""

    model_config = {"frozen": True}

    id: str
    role: Role
    is_blocked: bool = False
    rider_status: Optional[RiderStatus] = None


class AuthState(BaseModel):
    """
    Gate state.

    Replaced wholesale on every transition, never patched.
    """

    model_config = {"frozen": True}

    status: GateStatus
    loading: bool = False
    authenticated: bool = False
    authorized: bool = False
    user: Optional[GateUser] = None
    error: Optional[str] = None

    @classmethod
    def initial(cls) -> "AuthState":
        return cls(status=GateStatus.LOADING, loading=True)

    @classmethod
    def unauthenticated(cls, error: Optional[str] = None) -> "AuthState":
        return cls(status=GateStatus.UNAUTHENTICATED, error=error)


class GateAction(str, Enum):
    """What the router should do."""

    SHOW_LOADING = "show_loading"
    RENDER = "render"
    REDIRECT = "redirect"


class GateDecision(BaseModel):
    """Render-or-redirect decision derived from an AuthState."""

    model_config = {"frozen": True}

    action: GateAction
    location: Optional[str] = Field(None, description="Redirect target")
    reason: Optional[str] = Field(None, description="Shown on the target screen")
    return_to: Optional[str] = Field(None, description="Requested path, for post-login return")


class AccessCheckResponse(BaseModel):
    """Response body for an access check."""

    path: str
    state: AuthState
    decision: GateDecision
    sign_out: bool = Field(False, description="Client must drop its sessions")
