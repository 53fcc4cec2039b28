"""
Access module.

Route guarding: the authorization gate state machine and the route policy
that feeds it.

Public API:
- ISessionSource: Where the gate reads sessions from
- AuthState, GateStatus, GateDecision: Gate state and its outcome
- RoutePaths: Redirect targets
- UnknownRouteError
"""

from .interfaces import ISessionSource
from .models import (
    AccessCheckResponse,
    AuthState,
    GateAction,
    GateDecision,
    GateStatus,
    GateUser,
)
from .paths import RoutePaths
from .exceptions import UnknownRouteError

__all__ = [
    # Interfaces
    "ISessionSource",
    # Models
    "AccessCheckResponse",
    "AuthState",
    "GateAction",
    "GateDecision",
    "GateStatus",
    "GateUser",
    "RoutePaths",
    # Exceptions
    "UnknownRouteError",
]
