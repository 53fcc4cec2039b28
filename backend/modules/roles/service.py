"""
Role resolution engine.

Decides who the caller is using a three-tier precedence chain:

1. Self-scoped: resolve_my_role on the active session.
2. Identifier-scoped: resolve_role_by_phone / resolve_role_by_email, retried
   to ride out replication lag after account creation. Used by the login
   flow and as the customer upgrade check.
3. Direct read: the profile record and rider record, used when tier 1 is
   unavailable.

Tiers run strictly in order, one call at a time. Transport failures inside
a tier are absorbed by falling back; only identity conflicts and the overall
timeout escape.
"""

import asyncio
import logging
from typing import Optional

from supabase import AsyncClient

from shared.config import get_settings
from shared.identifiers import (
    is_email,
    mask_identifier,
    normalize_email,
    normalize_phone_digits,
)

from .client import SupabaseRoleServiceClient
from .exceptions import RoleResolutionTimeoutError, RoleServiceError
from .interfaces import IRoleResolver, IRoleServiceClient
from .models import (
    RiderStatus,
    Role,
    RoleResolution,
    SelfRoleRow,
    normalize_role,
)

logger = logging.getLogger(__name__)


class RoleResolver(IRoleResolver):
    """
    Implementation of the role resolution engine.

    One instance serves one backend session; it holds no results between
    calls, so every resolve() reflects the backend as it is now.
    """

    def __init__(
        self,
        client: IRoleServiceClient,
        attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
        timeout: Optional[float] = None,
        country_code: Optional[str] = None,
    ):
        settings = get_settings()
        self._client = client
        self._attempts = max(1, attempts if attempts is not None else settings.role_lookup_attempts)
        self._retry_delay = (
            retry_delay if retry_delay is not None else settings.role_lookup_retry_delay_seconds
        )
        self._timeout = timeout if timeout is not None else settings.role_resolution_timeout_seconds
        self._country_code = country_code or settings.default_country_code

    async def resolve(
        self,
        user_id: str,
        identifier_hint: Optional[str] = None,
    ) -> RoleResolution:
        """Resolve the session's role within the overall time budget."""
        try:
            resolution = await asyncio.wait_for(
                self._resolve(user_id, identifier_hint),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"Role resolution for {user_id} timed out after {self._timeout}s")
            raise RoleResolutionTimeoutError(self._timeout) from None

        logger.debug(
            f"Resolved {user_id}: role={resolution.role.value} "
            f"blocked={resolution.is_blocked} "
            f"needs_registration={resolution.needs_registration}"
        )
        return resolution

    async def resolve_by_identifier(self, identifier: str) -> RoleResolution:
        """
        Tier 2: resolve by phone or e-mail.

        Retries when the call fails or finds nothing, because a freshly
        created account can take a moment to appear in the role tables.
        Identity conflicts are raised immediately.
        """
        if is_email(identifier):
            kind, value = "email", normalize_email(identifier)
            lookup = self._client.resolve_role_by_email
        else:
            kind, value = "phone", normalize_phone_digits(identifier, self._country_code)
            lookup = self._client.resolve_role_by_phone

        if not value:
            return RoleResolution.default_customer()

        row = None
        for attempt in range(1, self._attempts + 1):
            try:
                row = await lookup(value)
            except RoleServiceError as e:
                logger.warning(
                    f"Role lookup by {kind} {mask_identifier(value)} failed "
                    f"(attempt {attempt}/{self._attempts}): {e.message}"
                )
                row = None
            if row is not None:
                break
            if attempt < self._attempts:
                await asyncio.sleep(self._retry_delay)

        if row is None:
            logger.warning(
                f"No role found by {kind} {mask_identifier(value)} after "
                f"{self._attempts} attempts, defaulting to customer"
            )
            return RoleResolution.default_customer()

        return RoleResolution(role=normalize_role(row.role), is_blocked=row.is_blocked)

    async def _resolve(self, user_id: str, identifier_hint: Optional[str]) -> RoleResolution:
        row = await self._resolve_self()
        if row is None:
            return await self._resolve_direct(user_id)
        return await self._from_self_row(user_id, row, identifier_hint)

    async def _resolve_self(self) -> Optional[SelfRoleRow]:
        """Tier 1. None means 'unusable, go to tier 3'."""
        try:
            row = await self._client.resolve_my_role()
        except RoleServiceError as e:
            logger.warning(f"resolve_my_role unavailable, using direct read: {e.message}")
            return None
        if row is None:
            logger.warning("resolve_my_role returned no rows, using direct read")
        return row

    async def _from_self_row(
        self,
        user_id: str,
        row: SelfRoleRow,
        identifier_hint: Optional[str],
    ) -> RoleResolution:
        role = normalize_role(row.role)

        if role is Role.RIDER:
            # No rider record exists yet, so there is nothing to block.
            if row.needs_registration:
                return RoleResolution.rider_needs_registration()
            if row.is_blocked:
                return RoleResolution(
                    role=Role.RIDER,
                    rider_status=RiderStatus.REJECTED,
                    is_blocked=True,
                )
            return await self._rider_with_detail(user_id, is_blocked=False)

        if role is Role.CUSTOMER and identifier_hint:
            upgraded = await self.resolve_by_identifier(identifier_hint)
            if upgraded.role is not Role.CUSTOMER:
                logger.info(
                    f"Upgrading {user_id} from customer to {upgraded.role.value} "
                    f"via {mask_identifier(identifier_hint)}"
                )
                return await self._upgraded(user_id, upgraded, row.is_blocked)

        return RoleResolution(
            role=role,
            is_blocked=row.is_blocked,
            needs_registration=row.needs_registration and not row.is_blocked,
        )

    async def _upgraded(
        self,
        user_id: str,
        upgraded: RoleResolution,
        blocked: bool,
    ) -> RoleResolution:
        """
        Riders found by identifier get the same detail check as tier 1 riders.

        A block on the tier 1 row survives the upgrade.
        """
        if upgraded.role is not Role.RIDER:
            if not blocked or upgraded.is_blocked:
                return upgraded
            return RoleResolution(role=upgraded.role, is_blocked=True)
        if blocked or upgraded.is_blocked:
            return RoleResolution(
                role=Role.RIDER,
                rider_status=RiderStatus.REJECTED,
                is_blocked=True,
            )
        return await self._rider_with_detail(user_id, is_blocked=False)

    async def _rider_with_detail(self, user_id: str, is_blocked: bool) -> RoleResolution:
        try:
            detail = await self._client.get_rider_record(user_id)
        except RoleServiceError as e:
            logger.warning(f"Rider record read failed for {user_id}: {e.message}")
            detail = None

        if detail is None:
            return RoleResolution(
                role=Role.RIDER,
                rider_status=RiderStatus.PENDING,
                is_blocked=is_blocked,
            )
        return RoleResolution(
            role=Role.RIDER,
            rider_status=detail.status,
            is_blocked=is_blocked or detail.deactivated,
        )

    async def _resolve_direct(self, user_id: str) -> RoleResolution:
        """Tier 3: read the records directly."""
        try:
            user = await self._client.get_user_record(user_id)
        except RoleServiceError as e:
            logger.error(f"Direct role read failed for {user_id}: {e.message}")
            return RoleResolution.default_customer()

        if user is None:
            return RoleResolution.default_customer()

        role = normalize_role(user.role)
        if role is not Role.RIDER:
            return RoleResolution(role=role, is_blocked=user.is_blocked)

        try:
            detail = await self._client.get_rider_record(user_id)
        except RoleServiceError as e:
            logger.warning(f"Rider record read failed for {user_id}: {e.message}")
            return RoleResolution(
                role=Role.RIDER,
                rider_status=RiderStatus.PENDING,
                is_blocked=user.is_blocked,
            )

        if detail is None:
            return RoleResolution.rider_needs_registration()
        return RoleResolution(
            role=Role.RIDER,
            rider_status=detail.status,
            is_blocked=user.is_blocked or detail.deactivated,
        )


def create_role_resolver(db: AsyncClient) -> RoleResolver:
    """Build a resolver bound to one signed-in Supabase client."""
    return RoleResolver(SupabaseRoleServiceClient(db))
