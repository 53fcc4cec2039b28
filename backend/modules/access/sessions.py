"""
Session source for a single API request.
"""

from typing import Callable, Optional

from shared.config import get_settings
from shared.identifiers import recover_identifiers
from shared.models import AuthenticatedUser, BackendSession


class RequestSessionSource:
    """
    ISessionSource built from a validated backend access token.

    A request's session never changes while it is being served, so there
    are no change events. Signing out cannot revoke the caller's token from
    here; it is recorded so the response can tell the client to drop it.
    """

    def __init__(self, user: AuthenticatedUser, synthetic_domain: Optional[str] = None):
        self._user = user
        self._synthetic_domain = synthetic_domain or get_settings().identity_bridge_domain
        self.signed_out = False

    async def get_session(self) -> Optional[BackendSession]:
        if self.signed_out:
            return None
        phone, email = recover_identifiers(
            email=self._user.email,
            phone=self._user.phone,
            metadata=self._user.user_metadata,
            synthetic_domain=self._synthetic_domain,
        )
        return BackendSession(
            user_id=self._user.id,
            access_token=self._user.access_token,
            phone=phone,
            email=email,
        )

    def on_session_change(self, callback: Callable[[str], None]) -> Callable[[], None]:
        return lambda: None

    async def sign_out(self) -> None:
        self.signed_out = True
