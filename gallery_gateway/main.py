"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because tests
build apps around an in-memory store and their own Settings.

For local development:
    uvicorn gallery_gateway.main:app --reload --port 8080

For production (Cloud Run sets PORT):
    python -m gallery_gateway.main
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.dependencies import GatewayContext
from .api.routes import albums, health, images
from .config.settings import Settings, get_settings
from .core.errors import GatewayError, PayloadTooLargeError
from .core.gallery.auth import Authenticator
from .core.gallery.service import ObjectStore
from .infrastructure.storage.client import StorageConfig, create_storage_client

logger = logging.getLogger(__name__)

_MISSING_ERROR_TYPES = {"missing", "string_too_short"}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message})


def _validation_message(exc: RequestValidationError) -> str:
    """
    Summarize validation errors using wire field names.

    Absent or empty fields are reported together as
    "Missing required fields: a, b"; anything else falls back to the first
    error's location and message.
    """
    errors = exc.errors()
    missing = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        if error.get("type") in _MISSING_ERROR_TYPES:
            missing.append(".".join(loc) or "body")

    if missing and len(missing) == len(errors):
        return f"Missing required fields: {', '.join(missing)}"

    first = errors[0] if errors else {}
    loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    msg = first.get("msg", "Invalid request")
    return f"Invalid request: {loc}: {msg}" if loc else f"Invalid request: {msg}"


def build_store(settings: Settings) -> Optional[ObjectStore]:
    """Create the object store, or None when no bucket is configured."""
    if not settings.bucket_name:
        return None

    config = StorageConfig(
        bucket_name=settings.bucket_name,
        gcs_project=settings.gcs_project,
        s3_endpoint_url=settings.s3_endpoint_url,
        s3_access_key_id=settings.s3_access_key_id,
        s3_secret_access_key=settings.s3_secret_access_key,
        s3_region=settings.s3_region,
    )
    return create_storage_client(config=config, backend=settings.storage_backend)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup configuration and shutdown."""
    context: GatewayContext = app.state.context
    settings = context.settings

    logger.info(
        "Gallery gateway starting",
        extra={
            "version": settings.api_version,
            "storage_backend": settings.storage_backend,
            "auth_enabled": context.authenticator.enabled,
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    if context.store is None:
        logger.warning("BUCKET_NAME not set - uploads disabled")
    else:
        logger.info("Using bucket", extra={"bucket": context.store.bucket_name})

    yield

    logger.info("Gallery gateway shutting down")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ObjectStore] = None,
) -> FastAPI:
    """
    Application factory.

    Args:
        settings: Configuration; loaded from the environment when omitted
        store: Object store override; built from settings when omitted
    """
    settings = settings or get_settings()

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=settings.log_level.upper(),
    )

    context = GatewayContext(
        settings=settings,
        authenticator=Authenticator(secret=settings.auth_secret),
        store=store if store is not None else build_store(settings),
    )

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Upload gateway for photo-gallery albums and images.

        ## Authentication

        Storage endpoints require the shared secret in `X-PT-Auth: <token>`
        or `Authorization: Bearer <token>`, unless no secret is configured.

        ## Workflow

        1. **Register the album**: `POST /api/create-album`
        2. **Upload images**, either directly with `POST /api/upload`, or via
           `POST /api/get-upload-url`, a PUT to the returned URL, then
           `POST /api/set-image-metadata`.
        """,
        lifespan=lifespan,
    )
    app.state.context = context

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        """Reject oversized bodies before they are read."""
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            if int(content_length) > settings.max_upload_size_bytes:
                exc = PayloadTooLargeError(
                    f"Request body exceeds {settings.max_upload_size_mb}MB"
                )
                return _error(exc.status_code, exc.message)
        return await call_next(request)

    # CORS middleware
    # Open to every origin by default; narrow with CORS_ORIGINS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-PT-Auth"],
    )

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(albums.router, prefix="/api", tags=["Albums"])
    app.include_router(images.router, prefix="/api", tags=["Images"])

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root():
        """Liveness check; never touches the bucket."""
        return {"ok": True, "msg": "Gallery gateway alive"}

    # Exception handlers
    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        if exc.status_code >= 500:
            logger.error(
                "Request failed",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "error": exc.message,
                },
            )
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, _validation_message(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        The full error is logged server-side; the client gets a generic
        message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# Create the application instance
# This is what uvicorn imports
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
