"""
Roles module exceptions.

Only IdentityConflictError and RoleResolutionTimeoutError ever escape the
resolution engine; RoleServiceError is absorbed by tier fallback.
"""

from shared.exceptions import AuthenticationError, ExternalServiceError


class RoleServiceError(ExternalServiceError):
    """Raised when a backend procedure call or record read fails in transit."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Role service call '{operation}' failed: {reason}",
            service="supabase",
            code="ROLE_SERVICE_UNAVAILABLE",
            details={"operation": operation},
        )
        self.operation = operation


class IdentityConflictError(AuthenticationError):
    """
    Raised when a phone or e-mail is already claimed by a different account.

    This is a security boundary, not a transient condition: it is never
    retried, and whoever catches it must sign the caller out of both the
    backend and the external identity provider.
    """

    def __init__(self, identifier_kind: str):
        noun = "phone number" if identifier_kind == "phone" else "email"
        super().__init__(
            f"This {noun} is linked to a different account. Contact support.",
            code="IDENTITY_CONFLICT",
            details={"identifier_kind": identifier_kind},
        )
        self.identifier_kind = identifier_kind


class RoleResolutionTimeoutError(ExternalServiceError):
    """Raised when a whole resolution exceeds its time budget."""

    def __init__(self, timeout_seconds: float):
        super().__init__(
            f"Role resolution timed out after {timeout_seconds:g}s",
            service="supabase",
            code="ROLE_RESOLUTION_TIMEOUT",
            details={"timeout_seconds": timeout_seconds},
        )
