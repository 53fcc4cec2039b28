"""
Roles module.

Resolves who a backend session belongs to, in authorization terms.

Public API:
- IRoleResolver: Interface for role resolution
- IRoleServiceClient: Interface onto the backend's role procedures
- RoleResolution: The engine's single output
- Role / RiderStatus: Closed enumerations
- Role exceptions: IdentityConflictError, etc.
"""

from .interfaces import IRoleResolver, IRoleServiceClient
from .models import (
    Role,
    RiderStatus,
    RoleResolution,
    normalize_role,
)
from .exceptions import (
    RoleServiceError,
    IdentityConflictError,
    RoleResolutionTimeoutError,
)

__all__ = [
    # Interfaces
    "IRoleResolver",
    "IRoleServiceClient",
    # Models
    "Role",
    "RiderStatus",
    "RoleResolution",
    "normalize_role",
    # Exceptions
    "RoleServiceError",
    "IdentityConflictError",
    "RoleResolutionTimeoutError",
]
