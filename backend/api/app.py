"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import get_settings as get_shared_settings
from shared.exceptions import ExternalServiceError, HaazirError, NotFoundError, ValidationError
from .config import get_settings
from .routes import health
from modules.access.routes import router as access_router
from modules.identity.routes import router as identity_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    settings = get_settings()
    logger.info(f"Starting Haazir Access API on {settings.host}:{settings.port}")
    yield
    logger.info("Shutting down Haazir Access API")


async def haazir_error_handler(request: Request, exc: HaazirError) -> JSONResponse:
    """Map uncaught domain errors onto HTTP status codes."""
    if isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, ValidationError):
        status_code = 422
    elif isinstance(exc, ExternalServiceError):
        status_code = 502
    else:
        status_code = 500
    logger.warning(f"{request.method} {request.url.path} failed: {exc.code} {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    shared = get_shared_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=shared.app_name,
        description="Identity bridging and role-based route access",
        version=shared.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_exception_handler(HaazirError, haazir_error_handler)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(identity_router, prefix="/api/identity", tags=["identity"])
    app.include_router(access_router, prefix="/api/access", tags=["access"])

    return app


# Application instance for uvicorn
app = create_app()
