"""
Identity module exceptions.

These exceptions are raised by the identity module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from typing import Optional

from shared.exceptions import (
    AuthenticationError,
    ExternalServiceError,
    HaazirError,
    ValidationError,
)


class IdentityBridgeError(HaazirError):
    """
    Raised when an external identity cannot be turned into a backend session.
    """

    def __init__(
        self,
        message: str = "Account setup failed. Please try again.",
        reason: Optional[str] = None,
        timed_out: bool = False,
    ):
        super().__init__(
            message,
            code="IDENTITY_BRIDGE_FAILED",
            details={"reason": reason} if reason else {},
        )
        self.timed_out = timed_out


class BackendAuthError(ExternalServiceError):
    """Raised when the backend auth service fails for any other reason."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(
            message,
            service="supabase-auth",
            code="BACKEND_AUTH_FAILED",
            details={"status": status} if status else {},
        )


class InvalidCredentialsError(AuthenticationError):
    """Sign-in rejected: no account with this credential (or wrong secret)."""

    def __init__(self):
        super().__init__("Invalid login credentials", code="INVALID_CREDENTIALS")


class AccountExistsError(AuthenticationError):
    """Sign-up rejected because the account is already registered."""

    def __init__(self):
        super().__init__("User already registered", code="ACCOUNT_EXISTS")


class ExternalTokenError(AuthenticationError):
    """Raised when an external identity token is missing, invalid or expired."""

    def __init__(self, message: str = "Invalid identity token"):
        super().__init__(message, code="INVALID_IDENTITY_TOKEN")


class MissingIdentifierError(ValidationError):
    """Raised when an identity carries neither a usable phone nor e-mail."""

    def __init__(self):
        super().__init__(
            "A verified phone number or email is required",
            code="MISSING_IDENTIFIER",
        )
