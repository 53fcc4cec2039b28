"""
Access module interfaces.
"""

from typing import Callable, Optional, Protocol, runtime_checkable

from shared.models import BackendSession


@runtime_checkable
class ISessionSource(Protocol):
    """
    Where the gate reads the current session from.

    SupabaseBackendAuth satisfies this; so does a session rebuilt from a
    validated access token.
    """

    async def get_session(self) -> Optional[BackendSession]:
        """Current session, or None when signed out."""
        ...

    def on_session_change(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Subscribe to session-change events; returns an unsubscribe callable."""
        ...

    async def sign_out(self) -> None:
        """End the session."""
        ...
