"""
FastAPI application factory for CharForge.

This module handles FastAPI app creation, middleware configuration,
error handler registration and router registration.
"""

from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..api.characters import character_router
from ..api.reference import reference_router
from ..api.wizard import wizard_router
from ..auth.endpoints import auth_router
from ..auth.users import auth_backend, fastapi_users
from ..config import get_config
from ..error_handlers import register_error_handlers
from ..middleware.correlation_middleware import CorrelationMiddleware
from ..structured_logging.enhanced_logging_config import get_logger
from .lifespan import lifespan

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured application. Services are attached to
        app.state.container by the lifespan.
    """
    app = FastAPI(
        title="CharForge API",
        description="Character creation and management for fifth edition tabletop characters",
        version=__version__,
        lifespan=lifespan,
    )

    cors = get_config().cors
    allow_methods = [str(m).upper() for m in cors.allow_methods]
    logger.info(
        "CORS configuration",
        allow_origins=cors.allow_origins,
        allow_methods=allow_methods,
        allow_headers=cors.allow_headers,
        allow_credentials=cors.allow_credentials,
        max_age=cors.max_age,
    )

    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.allow_origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=allow_methods,
        allow_headers=cors.allow_headers,
        expose_headers=["X-Correlation-ID"],
        max_age=cors.max_age,
    )

    register_error_handlers(app)

    app.include_router(auth_router)
    # Form-based login used by the OpenAPI "Authorize" dialog
    app.include_router(fastapi_users.get_auth_router(auth_backend), prefix="/auth/jwt", tags=["auth"])

    app.include_router(reference_router)
    app.include_router(character_router)
    app.include_router(wizard_router)

    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, Any]:
        """Liveness check."""
        return {"status": "ok", "version": __version__}

    return app
