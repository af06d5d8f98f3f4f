"""FastAPI application entry point."""

import asyncio
import logging
import uuid as _uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send
from structlog.contextvars import bound_contextvars

from linkmanager import __version__
from linkmanager.api.router import api_router
from linkmanager.api.site_data import get_site_data
from linkmanager.config import Settings, get_settings
from linkmanager.dependencies import create_site_config_repository, create_upload_storage
from linkmanager.rate_limit import create_limiter
from linkmanager.repositories.site_config_repository import StorageWriteFault
from linkmanager.schemas.site_config import HealthResponse
from linkmanager.services.upload_service import UPLOAD_URL_PREFIX, SizeLimitExceeded, UploadError
from linkmanager.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    logger.info("Server running at http://%s:%s", settings.host, settings.port)
    logger.info("Data file: %s", settings.data_file.resolve())
    logger.info("Upload directory: %s", settings.upload_dir.resolve())
    yield
    logger.info("Server shutting down...")


# ---------------------------------------------------------------------------
# Request ID middleware (pure ASGI)
# ---------------------------------------------------------------------------


class RequestIDMiddleware:
    """Inject a unique request ID into every request/response cycle."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        request_id = headers.get(b"x-request-id", b"").decode() or str(_uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                response_headers = list(message.get("headers", []))
                response_headers.append((b"x-request-id", request_id.encode()))
                message["headers"] = response_headers
            await send(message)

        with bound_contextvars(request_id=request_id):
            await self.app(scope, receive, send_with_request_id)


# ---------------------------------------------------------------------------
# Security headers middleware (pure ASGI)
# ---------------------------------------------------------------------------

_SECURITY_HEADERS: list[tuple[bytes, bytes]] = [
    (b"x-content-type-options", b"nosniff"),
    (b"x-frame-options", b"DENY"),
    (b"referrer-policy", b"strict-origin-when-cross-origin"),
]


class SecurityHeadersMiddleware:
    """Add standard security headers to every response."""

    def __init__(self, app: ASGIApp, hsts: bool = False) -> None:
        self.app = app
        self.hsts = hsts

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_security_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                response_headers = list(message.get("headers", []))
                response_headers.extend(_SECURITY_HEADERS)
                if self.hsts:
                    response_headers.append(
                        (b"strict-transport-security", b"max-age=63072000; includeSubDomains")
                    )
                message["headers"] = response_headers
            await send(message)

        await self.app(scope, receive, send_with_security_headers)


# ---------------------------------------------------------------------------
# Exception handlers: every failure becomes {success: false, message}
# ---------------------------------------------------------------------------


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(UploadError)
    async def _upload_error_handler(request: Request, exc: UploadError):
        logger.info("Upload rejected: %s", exc.message)
        return _failure(exc.status_code, exc.message)

    @app.exception_handler(StorageWriteFault)
    async def _storage_write_fault_handler(request: Request, exc: StorageWriteFault):
        logger.error("Storage write failed on %s %s: %s", request.method, request.url.path, exc)
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to store file")

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        # Cancellation must propagate
        if isinstance(exc, asyncio.CancelledError):
            raise
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# ---------------------------------------------------------------------------
# Upload size guard (pure ASGI)
# ---------------------------------------------------------------------------

# Room for the multipart boundary and part headers around the file itself.
MULTIPART_OVERHEAD_BYTES = 64 * 1024


class UploadSizeLimitMiddleware:
    """Reject uploads whose declared ``Content-Length`` is over the ceiling.

    The check runs before the body is read, so an oversize request is never
    spooled. Requests without a usable ``Content-Length`` pass through and are
    still bounded by the upload service while it copies the file.
    """

    def __init__(self, app: ASGIApp, path: str, max_bytes: int) -> None:
        self.app = app
        self.path = path
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] != "POST" or scope["path"] != self.path:
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        try:
            declared = int(headers.get(b"content-length", b""))
        except ValueError:
            declared = None

        if declared is not None and declared > self.max_bytes + MULTIPART_OVERHEAD_BYTES:
            error = SizeLimitExceeded(self.max_bytes)
            logger.info("Upload rejected before reading body: %d bytes declared", declared)
            response = _failure(error.status_code, error.message)
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)


def _utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_application(settings: Settings | None = None) -> FastAPI:
    """Application factory."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="Image Link Manager API",
        description="Stores the shared site configuration and accepts image uploads.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.site_config_repository = create_site_config_repository(settings)
    app.state.upload_storage = create_upload_storage(settings)

    # Rate limiter
    app.state.limiter = create_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]  # slowapi typing mismatch
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        UploadSizeLimitMiddleware,
        path="/api/upload",
        max_bytes=settings.max_upload_bytes,
    )
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, hsts=settings.is_production)

    allow_any_origin = "*" in settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=not allow_any_origin,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["Health"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Liveness check."""
        return HealthResponse(status="OK", timestamp=_utc_timestamp())

    # Reads are never throttled
    for endpoint in (get_site_data, health_check):
        app.state.limiter.exempt(endpoint)

    app.mount(
        UPLOAD_URL_PREFIX,
        StaticFiles(directory=settings.upload_dir),
        name="uploads",
    )
    # Must be mounted last: it matches every path not claimed above.
    if settings.public_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.public_dir, html=True), name="public")

    return app


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "linkmanager.main:create_application",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
