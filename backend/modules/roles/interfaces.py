"""
Roles module interfaces.

IRoleServiceClient is the narrow seam onto the backend; IRoleResolver is what
the identity and access modules depend on.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import (
    IdentifierRoleRow,
    RiderRecord,
    RoleResolution,
    SelfRoleRow,
    UserRecord,
)


@runtime_checkable
class IRoleServiceClient(Protocol):
    """
    Remote role queries against the backend.

    Every method returns one typed row or None. Transport failures raise
    RoleServiceError; claimed identifiers raise IdentityConflictError.
    """

    async def resolve_my_role(self) -> Optional[SelfRoleRow]:
        """Caller-scoped resolution using only the active session."""
        ...

    async def resolve_role_by_phone(self, phone: str) -> Optional[IdentifierRoleRow]:
        """Resolve the role registered under a digits-only phone number."""
        ...

    async def resolve_role_by_email(self, email: str) -> Optional[IdentifierRoleRow]:
        """Resolve the role registered under a lower-cased e-mail."""
        ...

    async def get_user_record(self, user_id: str) -> Optional[UserRecord]:
        """Read the user's profile record directly."""
        ...

    async def get_rider_record(self, user_id: str) -> Optional[RiderRecord]:
        """Read the rider detail record directly."""
        ...


@runtime_checkable
class IRoleResolver(Protocol):
    """Interface for role resolution."""

    async def resolve(
        self,
        user_id: str,
        identifier_hint: Optional[str] = None,
    ) -> RoleResolution:
        """
        Produce one authoritative RoleResolution for a backend session.

        Args:
            user_id: Backend user ID of the active session
            identifier_hint: Phone or e-mail used for the upgrade check

        Returns:
            A fresh, immutable RoleResolution

        Raises:
            IdentityConflictError: If the hint is claimed by another account
            RoleResolutionTimeoutError: If the resolution runs out of time
        """
        ...

    async def resolve_by_identifier(self, identifier: str) -> RoleResolution:
        """
        Resolve by phone or e-mail, absorbing replication lag with retries.

        Raises:
            IdentityConflictError: If the identifier is claimed by another account
        """
        ...
