"""
FastAPI application for the contacts API.

create_app() builds an app from an explicit Settings instance; every
failure leaves through the centralized responders below as
{"message": ...} with the matching status code.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from contacts_api import __version__
from contacts_api.api.deps import build_services
from contacts_api.auth.routes import router as users_router
from contacts_api.config import Settings, configure_logging, get_settings
from contacts_api.contacts.routes import router as contacts_router
from contacts_api.integrations.sentry import capture_exception, init_sentry
from contacts_api.storage import StorageProvider

logger = logging.getLogger(__name__)


# =============================================================================
# Error Responders
# =============================================================================


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Validation error"
    first = errors[0]
    field = ".".join(
        p for p in first.get("loc", ()) if isinstance(p, str) and p not in ("body", "query", "path")
    )
    return f"{field}: {first.get('msg')}" if field else str(first.get("msg"))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        {"message": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _validation_message(exc)
    logger.info(f"Validation failed on {request.url.path}: {message}")
    return JSONResponse({"message": message}, status_code=400)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    capture_exception(exc, path=request.url.path)
    return JSONResponse({"message": "Server error"}, status_code=500)


# =============================================================================
# App Factory
# =============================================================================


def create_app(settings: Settings | None = None, storage: StorageProvider | None = None) -> FastAPI:
    """Build the API with its own services, routers and error handling."""
    settings = settings or get_settings()
    configure_logging(settings)

    services = build_services(settings, storage)
    services.avatars.ensure_dirs()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if init_sentry(settings):
            logger.info("Sentry error tracking enabled")
        logger.info(f"Contacts API starting in {settings.environment} mode")
        yield
        logger.info("Contacts API shutting down")

    app = FastAPI(
        title="Contacts API",
        description="Address book with accounts, sessions and avatars",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.services = services

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Routers
    app.include_router(users_router, prefix=settings.api_prefix)
    app.include_router(contacts_router, prefix=settings.api_prefix)

    # Uploaded avatars: "avatars/<file>" is served at /avatars/<file>
    app.mount(
        f"/{services.avatars.avatars_dir.name}",
        StaticFiles(directory=services.avatars.avatars_dir),
        name="avatars",
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "contacts-api"}

    return app
