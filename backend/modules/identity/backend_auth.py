"""
Supabase Auth adapter for the backend session service.
"""

import logging
from typing import Any, Callable, Optional

from supabase import AsyncClient, AuthApiError, AuthError

from shared.config import get_settings
from shared.identifiers import recover_identifiers
from shared.models import BackendSession

from .exceptions import AccountExistsError, BackendAuthError, InvalidCredentialsError

logger = logging.getLogger(__name__)

_INVALID_CREDENTIALS_CODES = {"invalid_credentials", "invalid_grant"}
_ACCOUNT_EXISTS_CODES = {"user_already_exists", "email_exists"}


def _error_code(error: AuthError) -> str:
    return (getattr(error, "code", None) or "").lower()


def _is_invalid_credentials(error: AuthError) -> bool:
    return (
        _error_code(error) in _INVALID_CREDENTIALS_CODES
        or "invalid login credentials" in error.message.lower()
    )


def _is_account_exists(error: AuthError) -> bool:
    return (
        _error_code(error) in _ACCOUNT_EXISTS_CODES
        or "already registered" in error.message.lower()
    )


class SupabaseBackendAuth:
    """
    IBackendAuth over a Supabase async client.

    The client is owned by one caller: signing in here changes whose session
    the client's PostgREST calls carry.
    """

    def __init__(self, db: AsyncClient, synthetic_domain: Optional[str] = None):
        self._db = db
        self._synthetic_domain = synthetic_domain or get_settings().identity_bridge_domain

    @property
    def client(self) -> AsyncClient:
        return self._db

    async def sign_in_with_password(self, email: str, password: str) -> BackendSession:
        try:
            response = await self._db.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthApiError as e:
            if _is_invalid_credentials(e):
                raise InvalidCredentialsError() from e
            raise BackendAuthError(e.message, status=getattr(e, "status", None)) from e
        except AuthError as e:
            raise BackendAuthError(e.message) from e

        if response.session is None:
            raise BackendAuthError("Session not ready")
        return self._to_session(response.session)

    async def sign_up(self, email: str, password: str, metadata: dict[str, str]) -> None:
        try:
            await self._db.auth.sign_up(
                {"email": email, "password": password, "options": {"data": metadata}}
            )
        except AuthApiError as e:
            if _is_account_exists(e):
                raise AccountExistsError() from e
            raise BackendAuthError(e.message, status=getattr(e, "status", None)) from e
        except AuthError as e:
            raise BackendAuthError(e.message) from e

    async def sign_out(self) -> None:
        try:
            await self._db.auth.sign_out()
        except AuthError as e:
            # The local session is cleared even when the revoke call fails.
            logger.warning(f"Backend sign-out did not reach the server: {e.message}")

    async def get_session(self) -> Optional[BackendSession]:
        try:
            session = await self._db.auth.get_session()
        except AuthError as e:
            raise BackendAuthError(e.message) from e
        return self._to_session(session) if session else None

    def on_session_change(self, callback: Callable[[str], None]) -> Callable[[], None]:
        def _listener(event: Any, _session: Any) -> None:
            callback(str(event))

        subscription = self._db.auth.on_auth_state_change(_listener)
        return subscription.unsubscribe

    def _to_session(self, session: Any) -> BackendSession:
        user = session.user
        phone, email = recover_identifiers(
            email=user.email,
            phone=user.phone,
            metadata=user.user_metadata,
            synthetic_domain=self._synthetic_domain,
        )
        return BackendSession(
            user_id=user.id,
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            phone=phone,
            email=email,
        )
