"""
Supabase-backed role service client.

The backend's procedures are inconsistent about shape: some return a list of
rows, some a single object, some nothing. This client flattens all of that
into one typed row (or None) so the resolution engine never sees transport
details.
"""

from typing import Any, Optional, TypeVar

import httpx
from postgrest.exceptions import APIError
from pydantic import BaseModel, ValidationError as PydanticValidationError
from supabase import AsyncClient

from shared.exceptions import HaazirError

from .exceptions import IdentityConflictError, RoleServiceError
from .models import IdentifierRoleRow, RiderRecord, SelfRoleRow, UserRecord

RowT = TypeVar("RowT", bound=BaseModel)

USER_TABLE = "profiles"
RIDER_TABLE = "riders"


class MalformedRoleResponseError(HaazirError):
    """Raised when the backend answers with a shape no tier can interpret."""

    def __init__(self, operation: str, payload: Any):
        super().__init__(
            f"Unexpected response shape from '{operation}'",
            code="MALFORMED_ROLE_RESPONSE",
            details={"operation": operation, "payload_type": type(payload).__name__},
        )


def first_row(operation: str, payload: Any, model: type[RowT]) -> Optional[RowT]:
    """
    Normalize a procedure or table payload into a single typed row.

    Accepts None, an empty list, a list of row dicts, or a single row dict.
    """
    if payload is None:
        return None
    if isinstance(payload, list):
        if not payload:
            return None
        payload = payload[0]
    if not isinstance(payload, dict):
        raise MalformedRoleResponseError(operation, payload)
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise MalformedRoleResponseError(operation, payload) from e


class SupabaseRoleServiceClient:
    """
    IRoleServiceClient over a signed-in Supabase client.

    The client must carry the caller's session: resolve_my_role is scoped by
    it and the table reads go through Row Level Security.
    """

    def __init__(self, db: AsyncClient):
        self._db = db

    async def resolve_my_role(self) -> Optional[SelfRoleRow]:
        payload = await self._rpc("resolve_my_role", {})
        return first_row("resolve_my_role", payload, SelfRoleRow)

    async def resolve_role_by_phone(self, phone: str) -> Optional[IdentifierRoleRow]:
        payload = await self._rpc(
            "resolve_role_by_phone", {"_phone": phone}, conflict_kind="phone"
        )
        return first_row("resolve_role_by_phone", payload, IdentifierRoleRow)

    async def resolve_role_by_email(self, email: str) -> Optional[IdentifierRoleRow]:
        payload = await self._rpc(
            "resolve_role_by_email", {"_email": email}, conflict_kind="email"
        )
        return first_row("resolve_role_by_email", payload, IdentifierRoleRow)

    async def get_user_record(self, user_id: str) -> Optional[UserRecord]:
        payload = await self._select(USER_TABLE, "role, is_blocked", user_id)
        return first_row(USER_TABLE, payload, UserRecord)

    async def get_rider_record(self, user_id: str) -> Optional[RiderRecord]:
        payload = await self._select(RIDER_TABLE, "verification_status, is_active", user_id)
        return first_row(RIDER_TABLE, payload, RiderRecord)

    async def _rpc(
        self,
        name: str,
        params: dict[str, Any],
        conflict_kind: Optional[str] = None,
    ) -> Any:
        try:
            response = await self._db.rpc(name, params).execute()
        except APIError as e:
            message = e.message or str(e)
            if conflict_kind and f"{conflict_kind}_already_claimed" in message:
                raise IdentityConflictError(conflict_kind) from e
            raise RoleServiceError(name, message) from e
        except httpx.HTTPError as e:
            raise RoleServiceError(name, str(e)) from e
        return response.data

    async def _select(self, table: str, columns: str, user_id: str) -> Any:
        try:
            response = await (
                self._db.table(table)
                .select(columns)
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        except APIError as e:
            raise RoleServiceError(f"{table}.select", e.message or str(e)) from e
        except httpx.HTTPError as e:
            raise RoleServiceError(f"{table}.select", str(e)) from e
        return response.data
