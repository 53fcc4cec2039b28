"""
Database client factory for Supabase.

Every client here uses the anon key: the access layer only ever acts as a
signed-in user, so Row Level Security and the caller-scoped procedures
(e.g. resolve_my_role) see the right identity.
"""

from supabase import acreate_client, AsyncClient

from .config import get_settings


def _require_config() -> tuple[str, str]:
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
        )
    return settings.supabase_url, settings.supabase_anon_key


async def create_supabase_client() -> AsyncClient:
    """
    Create a fresh, signed-out Supabase client.

    Used by the identity bridge, which signs in on the client it is given.
    Clients are never shared between identities.

    Returns:
        Async Supabase client configured with the anon key
    """
    url, key = _require_config()
    return await acreate_client(url, key)


async def get_supabase_user_client(access_token: str) -> AsyncClient:
    """
    Get Supabase client authenticated as a specific user.

    Use this for operations that should respect Row Level Security (RLS)
    and for caller-scoped procedures.

    Args:
        access_token: JWT access token from Supabase Auth

    Returns:
        Async Supabase client whose PostgREST requests carry the user's token
    """
    url, key = _require_config()
    client = await acreate_client(url, key)
    client.postgrest.auth(access_token)
    return client
