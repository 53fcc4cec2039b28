"""
Identity bridge and login flow.

The bridge turns an externally verified phone or e-mail into a backend
session, creating the backend account on first use. The login flow runs the
bridge, then resolves the role by identifier and picks a landing page.
"""

import asyncio
import logging
from typing import Optional

from shared.config import get_settings
from shared.identifiers import mask_identifier
from shared.models import BackendSession
from modules.access.paths import RoutePaths
from modules.roles.exceptions import IdentityConflictError
from modules.roles.interfaces import IRoleResolver
from modules.roles.models import RoleResolution

from .credentials import derive_credential
from .exceptions import (
    AccountExistsError,
    BackendAuthError,
    IdentityBridgeError,
    InvalidCredentialsError,
)
from .interfaces import IBackendAuth, IExternalIdentityProvider
from .models import ExternalIdentity, LoginResult, SyntheticCredential

logger = logging.getLogger(__name__)


class IdentityBridge:
    """
    Makes an externally verified identity usable as a backend session.

    bridge() is idempotent: running it again for the same identity signs in
    to the same backend account, whether or not it had to create it.
    Failures are surfaced, not retried; replication lag is the resolver's
    problem, not the bridge's.
    """

    def __init__(
        self,
        auth: IBackendAuth,
        secret_key: Optional[str] = None,
        domain: Optional[str] = None,
        timeout: Optional[float] = None,
        country_code: Optional[str] = None,
    ):
        settings = get_settings()
        self._auth = auth
        self._secret_key = secret_key if secret_key is not None else settings.identity_bridge_secret
        self._domain = domain or settings.identity_bridge_domain
        self._timeout = timeout if timeout is not None else settings.identity_bridge_timeout_seconds
        self._country_code = country_code or settings.default_country_code

    async def bridge(self, identity: ExternalIdentity) -> BackendSession:
        """
        Sign in to the backend as the given external identity.

        Returns:
            Active backend session

        Raises:
            IdentityBridgeError: If no session could be established
            MissingIdentifierError: If the identity has no usable identifier
        """
        credential = derive_credential(
            identity,
            domain=self._domain,
            secret_key=self._secret_key,
            country_code=self._country_code,
        )
        try:
            return await asyncio.wait_for(
                self._sign_in_or_create(credential),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Bridging {mask_identifier(credential.identifier)} timed out "
                f"after {self._timeout}s"
            )
            raise IdentityBridgeError(
                "Account setup timed out. Please try again.",
                reason="timeout",
                timed_out=True,
            ) from None

    async def _sign_in_or_create(self, credential: SyntheticCredential) -> BackendSession:
        masked = mask_identifier(credential.identifier)
        try:
            return await self._auth.sign_in_with_password(credential.email, credential.password)
        except InvalidCredentialsError:
            logger.info(f"No backend account for {masked}, creating one")
        except BackendAuthError as e:
            logger.error(f"Backend sign-in failed for {masked}: {e.message}")
            raise IdentityBridgeError(reason=e.message) from e

        try:
            await self._auth.sign_up(credential.email, credential.password, credential.metadata)
        except AccountExistsError:
            logger.info(f"Backend account for {masked} already exists, signing in")
        except BackendAuthError as e:
            logger.error(f"Backend account creation failed for {masked}: {e.message}")
            raise IdentityBridgeError(reason=e.message) from e

        try:
            return await self._auth.sign_in_with_password(credential.email, credential.password)
        except (InvalidCredentialsError, BackendAuthError) as e:
            logger.error(f"Backend sign-in after creation failed for {masked}: {e.message}")
            raise IdentityBridgeError(reason=e.message) from e


async def sign_out_everywhere(
    auth: IBackendAuth,
    external: Optional[IExternalIdentityProvider],
) -> None:
    """End the backend session and the external provider session."""
    await auth.sign_out()
    if external is not None:
        await external.sign_out()


def landing_path(resolution: RoleResolution, paths: RoutePaths) -> str:
    """Where a freshly signed-in user goes."""
    if resolution.is_blocked or resolution.needs_registration:
        return paths.account_status
    return paths.home_for(resolution.role)


class LoginService:
    """
    Login flow: bridge, resolve by identifier, choose a landing page.

    An identity conflict or a bridge timeout signs the caller out of both
    systems before the error propagates.
    """

    def __init__(
        self,
        bridge: IdentityBridge,
        auth: IBackendAuth,
        resolver: IRoleResolver,
        external: Optional[IExternalIdentityProvider] = None,
        paths: Optional[RoutePaths] = None,
    ):
        self._bridge = bridge
        self._auth = auth
        self._resolver = resolver
        self._external = external
        self._paths = paths or RoutePaths.from_settings()

    async def login(self, identity: ExternalIdentity) -> LoginResult:
        try:
            session = await self._bridge.bridge(identity)
            resolution = await self._resolver.resolve_by_identifier(
                identity.preferred_identifier
            )
        except IdentityConflictError:
            logger.warning(
                f"Identity conflict for {mask_identifier(identity.preferred_identifier)}, "
                "signing out of both systems"
            )
            await sign_out_everywhere(self._auth, self._external)
            raise
        except IdentityBridgeError as e:
            if e.timed_out:
                await sign_out_everywhere(self._auth, self._external)
            raise

        path = landing_path(resolution, self._paths)
        logger.info(f"Login for {session.user_id} as {resolution.role.value}, landing on {path}")
        return LoginResult(session=session, resolution=resolution, landing_path=path)


class DeferredExternalSignOut:
    """
    IExternalIdentityProvider for server-side use.

    The provider session lives on the client device, so the server records
    the sign-out and the API tells the client to drop its provider session.
    """

    def __init__(self) -> None:
        self.requested = False

    async def sign_out(self) -> None:
        self.requested = True
