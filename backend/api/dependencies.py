"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Long-lived collaborators are cached on the container;
anything bound to a caller's session is built per request through the
factories it hands out.
"""

from typing import TYPE_CHECKING, Awaitable, Callable

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.access.policy import RoutePolicy
    from modules.identity.interfaces import IExternalIdentityProvider, IExternalTokenVerifier
    from modules.identity.service import LoginService
    from modules.roles.interfaces import IRoleResolver


ResolverFactory = Callable[[str], Awaitable["IRoleResolver"]]
LoginServiceFactory = Callable[["IExternalIdentityProvider"], Awaitable["LoginService"]]


async def create_user_resolver(access_token: str) -> "IRoleResolver":
    """Resolver acting as the holder of access_token."""
    from modules.roles.service import create_role_resolver
    from shared.database import get_supabase_user_client

    return create_role_resolver(await get_supabase_user_client(access_token))


async def create_login_service(external: "IExternalIdentityProvider") -> "LoginService":
    """Login flow on a fresh, signed-out client of its own."""
    from modules.identity.backend_auth import SupabaseBackendAuth
    from modules.identity.service import IdentityBridge, LoginService
    from modules.roles.service import create_role_resolver
    from shared.database import create_supabase_client

    db = await create_supabase_client()
    auth = SupabaseBackendAuth(db)
    return LoginService(
        bridge=IdentityBridge(auth),
        auth=auth,
        resolver=create_role_resolver(db),
        external=external,
    )


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear them for testing.
    """

    def __init__(self) -> None:
        self._token_verifier: "IExternalTokenVerifier | None" = None
        self._route_policy: "RoutePolicy | None" = None

    @property
    def token_verifier(self) -> "IExternalTokenVerifier":
        """Get the external identity token verifier."""
        if self._token_verifier is None:
            from modules.identity.verifier import FirebaseTokenVerifier
            self._token_verifier = FirebaseTokenVerifier()
        return self._token_verifier

    @property
    def route_policy(self) -> "RoutePolicy":
        """Get the route access policy."""
        if self._route_policy is None:
            from modules.access.policy import RoutePolicy
            self._route_policy = RoutePolicy()
        return self._route_policy

    @property
    def resolver_factory(self) -> ResolverFactory:
        return create_user_resolver

    @property
    def login_service_factory(self) -> LoginServiceFactory:
        return create_login_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._token_verifier = None
        self._route_policy = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_token_verifier() -> "IExternalTokenVerifier":
    """FastAPI dependency for the external token verifier."""
    return get_container().token_verifier


def get_route_policy() -> "RoutePolicy":
    """FastAPI dependency for the route policy."""
    return get_container().route_policy


def get_resolver_factory() -> ResolverFactory:
    """FastAPI dependency for per-request role resolvers."""
    return get_container().resolver_factory


def get_login_service_factory() -> LoginServiceFactory:
    """FastAPI dependency for per-request login flows."""
    return get_container().login_service_factory
