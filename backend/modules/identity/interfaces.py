"""
Identity module interfaces.

IBackendAuth is the seam onto the backend session service; the access
module's gate reads sessions through the same object.
"""

from typing import Callable, Optional, Protocol, runtime_checkable

from shared.models import BackendSession

from .models import ExternalIdentity


@runtime_checkable
class IBackendAuth(Protocol):
    """
    Password sign-in against the backend session service.

    Implementations translate provider errors: a rejected credential raises
    InvalidCredentialsError, a duplicate sign-up raises AccountExistsError,
    anything else raises BackendAuthError.
    """

    async def sign_in_with_password(self, email: str, password: str) -> BackendSession:
        ...

    async def sign_up(self, email: str, password: str, metadata: dict[str, str]) -> None:
        ...

    async def sign_out(self) -> None:
        ...

    async def get_session(self) -> Optional[BackendSession]:
        ...

    def on_session_change(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Subscribe to session changes; returns an unsubscribe callable."""
        ...


@runtime_checkable
class IExternalIdentityProvider(Protocol):
    """The external identity provider, as far as this backend needs it."""

    async def sign_out(self) -> None:
        """Force the provider session to end (used on identity conflicts)."""
        ...


@runtime_checkable
class IExternalTokenVerifier(Protocol):
    """Turns an external provider ID token into a verified identity."""

    def verify(self, token: str) -> ExternalIdentity:
        """
        Raises:
            ExternalTokenError: If the token is missing, invalid or expired
        """
        ...
