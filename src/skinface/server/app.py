"""FastAPI application factory for the skinface avatar server."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from skinface import __version__
from skinface.identity.errors import (
    AllProvidersFailedError,
    InvalidIdentifierError,
    ProfileNotFoundError,
    ProviderUnavailableError,
    RenderError,
    SkinFaceError,
)
from skinface.server.catalog_sync import CatalogSync
from skinface.server.config import Settings
from skinface.server.context import AppContext, close_context, open_context

logger = logging.getLogger(__name__)

# Consistent JSON error shape: {"error": "<code>", "detail": "<message>"}
_STATUS_TO_ERROR = {
    400: "bad_request",
    404: "not_found",
    422: "validation_error",
    500: "internal_error",
    502: "bad_gateway",
}


def _error_response(status_code: int, detail: object) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": _STATUS_TO_ERROR.get(status_code, "error"),
            "detail": detail,
        },
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open long-lived clients and run the catalog sync across app lifetime."""
    settings: Settings = app.state.settings
    owns_context = getattr(app.state, "context", None) is None
    if owns_context:
        app.state.context = await open_context(settings)
    context: AppContext = app.state.context

    app.state.catalog_sync = None
    if settings.catalog_sync_enabled and settings.catalog_sync_configured:
        sync = CatalogSync(
            context.drasl,
            context.signer,
            context.sessions,
            interval=settings.catalog_sync_interval,
        )
        await sync.start()
        app.state.catalog_sync = sync
        logger.info("Catalog sync scheduled every %.0fs", settings.catalog_sync_interval)
    else:
        logger.info("Catalog sync is disabled")

    yield

    if app.state.catalog_sync is not None:
        await app.state.catalog_sync.stop()
    if owns_context:
        await close_context(context)


def create_app(context: AppContext | None = None) -> FastAPI:
    """Create and configure the skinface FastAPI application.

    When *context* is given it is used as-is and left open on shutdown;
    otherwise one is built from the environment in the lifespan.
    """
    settings = context.settings if context is not None else Settings()

    # Configure logging from settings
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if settings.debug:
        logging.getLogger("skinface").setLevel(logging.DEBUG)

    app = FastAPI(
        title="skinface",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.context = context

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(422, str(exc))

    @app.exception_handler(InvalidIdentifierError)
    async def invalid_identifier_handler(
        request: Request, exc: InvalidIdentifierError
    ) -> JSONResponse:
        return _error_response(400, str(exc))

    @app.exception_handler(ProfileNotFoundError)
    async def not_found_handler(request: Request, exc: ProfileNotFoundError) -> JSONResponse:
        return _error_response(404, str(exc))

    @app.exception_handler(ProviderUnavailableError)
    async def unavailable_handler(
        request: Request, exc: ProviderUnavailableError
    ) -> JSONResponse:
        logger.warning("Upstream failure on %s: %s", request.url.path, exc)
        return _error_response(500, str(exc))

    @app.exception_handler(AllProvidersFailedError)
    async def exhausted_handler(request: Request, exc: AllProvidersFailedError) -> JSONResponse:
        if isinstance(exc.last_error, ProfileNotFoundError):
            return _error_response(404, str(exc.last_error))
        logger.warning("Provider chain exhausted on %s: %s", request.url.path, exc)
        return _error_response(500, str(exc))

    @app.exception_handler(RenderError)
    async def render_handler(request: Request, exc: RenderError) -> JSONResponse:
        logger.warning("Render failure on %s: %s", request.url.path, exc)
        return _error_response(500, "Failed to render avatar")

    @app.exception_handler(SkinFaceError)
    async def skinface_handler(request: Request, exc: SkinFaceError) -> JSONResponse:
        logger.error("Unhandled skinface error on %s: %s", request.url.path, exc)
        return _error_response(500, str(exc))

    from skinface.server.routes.avatars import router as avatars_router
    from skinface.server.routes.health import router as health_router
    from skinface.server.routes.textures import router as textures_router

    app.include_router(avatars_router)
    app.include_router(textures_router)
    app.include_router(health_router)

    return app
