"""
After School Lessons Backend — FastAPI Application Factory
============================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (uvicorn afterschool.main:app) and the test suite, which
       passes its own Database to create_app().

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌─────────────────────┐ ┌──────┐ ┌────────┐       │
    │  │ Access (ID + log)   │→│ GZip │→│  CORS  │       │
    │  └─────────────────────┘ └──────┘ └────────┘       │
    │                                                     │
    │  Routes:                                            │
    │  GET / │ GET /lessons │ GET /search │ POST /order   │
    │  PUT /lessons/{id} │ GET /images/{file} │ /health   │
    │                                                     │
    │  Exception Handlers:                                │
    │  InvalidArgument→400 │ NotFound→404 │ Store→500     │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Build the Database handle (unless one was injected)
    3. Verify the store is reachable; on failure startup aborts (no retry)
    4. Ensure the images directory exists

    Shutdown:
    1. Dispose the engine (close all pooled connections)
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from afterschool import __version__
from afterschool.config import settings
from afterschool.database import Database
from afterschool.exceptions import (
    AfterSchoolError,
    InvalidArgumentError,
    NotFoundError,
    StoreUnavailableError,
)
from afterschool.logging_config import setup_logging
from afterschool.middleware.access import REQUEST_ID_HEADER, AccessLogMiddleware, request_id_var
from afterschool.routes import health, images, index, lessons, orders

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the store once for the whole process and close it at shutdown.

    A store that cannot be reached at startup is fatal: the exception
    propagates and uvicorn aborts startup.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("After School Classes API starting up...")

    if app.state.database is None:
        app.state.database = Database.from_settings(settings)
    database: Database = app.state.database

    try:
        tables = await database.connect()
    except StoreUnavailableError:
        logger.critical("Cannot start without the lesson store. Exiting.")
        await database.dispose()
        raise
    logger.info("Connected to database. Available collections: %s", ", ".join(tables) or "(none)")

    images_root = Path(app.state.images_dir)
    images_root.mkdir(parents=True, exist_ok=True)
    logger.info("Serving images from: %s", images_root.resolve())

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield  # Application runs here

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("After School Classes API shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, error: str, message: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "details": details,
            "request_id": request_id_var.get(""),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the shared error body.

    Handler hierarchy:
        InvalidArgumentError    → 400 invalid_argument
        RequestValidationError  → 400 invalid_argument (unparseable body)
        NotFoundError           → 404 not_found
        StoreUnavailableError   → 500 store_unavailable (details logged only)
        AfterSchoolError (base) → 500 internal_server_error
        HTTPException           → its own status (e.g. unknown route → 404)
        Exception (fallback)    → 500 internal_server_error
    """

    @app.exception_handler(InvalidArgumentError)
    async def handle_invalid_argument(request: Request, exc: InvalidArgumentError):
        logger.warning("[%s] Invalid argument: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "invalid_argument", exc.message, exc.context or None)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        fields = [
            ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            for err in exc.errors()
        ]
        logger.warning("[%s] Malformed request: %s", request_id_var.get(""), fields)
        return _error_response(
            400,
            "invalid_argument",
            "The request could not be parsed",
            {"fields": [f for f in fields if f]},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message, exc.context or None)

    @app.exception_handler(StoreUnavailableError)
    async def handle_store_unavailable(request: Request, exc: StoreUnavailableError):
        logger.error(
            "[%s] Store unavailable: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return _error_response(500, "store_unavailable", exc.message)

    @app.exception_handler(AfterSchoolError)
    async def handle_app_error(request: Request, exc: AfterSchoolError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, "internal_server_error", exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        error = "not_found" if exc.status_code == 404 else "http_error"
        return _error_response(exc.status_code, error, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Stack trace is logged server-side only, never returned."""
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again later.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    database: Optional[Database] = None,
    images_dir: Optional[str] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database:   Store handle to use. When None, the lifespan builds one
                    from settings at startup.
        images_dir: Directory served at /images (default: IMAGES_DIR).
    """
    app = FastAPI(
        title="After School Classes API",
        description=(
            "Lesson catalogue, search, spaces management and booking orders "
            "for an after-school lesson shop."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.images_dir = images_dir or settings.images_dir

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # Access → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(AccessLogMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(index.router)
    app.include_router(lessons.router)
    app.include_router(orders.router)
    app.include_router(images.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `afterschool.main:app` to be importable
app = create_app()


def run() -> None:
    """Console entry point: `afterschool-api`."""
    import uvicorn

    uvicorn.run(
        "afterschool.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
    )
