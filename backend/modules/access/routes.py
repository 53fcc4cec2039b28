"""
Access API endpoints.

Lets a client ask, for one route, what the authorization gate would do
with the caller's current backend session.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import ResolverFactory, get_resolver_factory, get_route_policy
from api.middleware.auth import get_current_user
from shared.models import AuthenticatedUser

from .exceptions import UnknownRouteError
from .gate import AuthorizationGate
from .models import AccessCheckResponse
from .policy import RoutePolicy
from .sessions import RequestSessionSource

router = APIRouter()


@router.get("/check", response_model=AccessCheckResponse)
async def check_access(
    path: str = Query(..., min_length=1, description="Route the client wants to open"),
    user: AuthenticatedUser = Depends(get_current_user),
    policy: RoutePolicy = Depends(get_route_policy),
    resolver_factory: ResolverFactory = Depends(get_resolver_factory),
) -> AccessCheckResponse:
    """
    Run one authorization gate evaluation for the given route.

    The resolution is never cached: every call re-resolves the caller.
    """
    try:
        allowed_roles = policy.allowed_roles(path)
    except UnknownRouteError as e:
        raise HTTPException(status_code=404, detail=e.message)

    sessions = RequestSessionSource(user)
    gate = AuthorizationGate(
        sessions=sessions,
        resolver=await resolver_factory(user.access_token),
        allowed_roles=allowed_roles,
        requested_path=path,
    )
    state = await gate.evaluate()
    return AccessCheckResponse(
        path=path,
        state=state,
        decision=gate.decide(state),
        sign_out=sessions.signed_out,
    )
