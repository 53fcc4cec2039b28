"""
Identity API endpoints.

Turns a verified external identity into a backend session.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials

from api.dependencies import (
    LoginServiceFactory,
    get_login_service_factory,
    get_token_verifier,
)
from api.middleware.auth import AuthError, bearer_scheme
from api.models.errors import ErrorResponse
from modules.roles.exceptions import IdentityConflictError

from .exceptions import ExternalTokenError, IdentityBridgeError, MissingIdentifierError
from .interfaces import IExternalTokenVerifier
from .models import BridgeResponse
from .service import DeferredExternalSignOut

router = APIRouter()


def _error(status_code: int, error: str, code: str, sign_out: bool = False) -> JSONResponse:
    body = ErrorResponse(error=error, code=code, sign_out=sign_out)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.post(
    "/bridge",
    response_model=BridgeResponse,
    responses={
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def bridge_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verifier: IExternalTokenVerifier = Depends(get_token_verifier),
    login_service_factory: LoginServiceFactory = Depends(get_login_service_factory),
):
    """
    Sign in to the backend with an external provider ID token.

    Creates the backend account on first use. The bearer token here is the
    provider's ID token, not a backend token.
    """
    if credentials is None:
        raise AuthError("Missing identity token")
    try:
        # Key-set fetches block, so verification stays off the event loop.
        identity = await asyncio.to_thread(verifier.verify, credentials.credentials)
    except ExternalTokenError as e:
        raise AuthError(e.message)

    external = DeferredExternalSignOut()
    service = await login_service_factory(external)
    try:
        result = await service.login(identity)
    except IdentityConflictError as e:
        return _error(409, e.message, e.code, sign_out=True)
    except MissingIdentifierError as e:
        return _error(422, e.message, e.code)
    except IdentityBridgeError as e:
        return _error(502, e.message, e.code, sign_out=external.requested)

    return BridgeResponse.from_result(result)
