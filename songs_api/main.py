"""
Songs API — FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes logging setup, middleware registration, route mounting,
       exception handlers and the store client's lifecycle in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn songs_api.main:app)
       and by tests, which pass in a fake store.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │ Req ID   │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────────────┐ ┌─────────────────┐     │
    │  │ GET|POST /songs        │ │ GET /health     │     │
    │  └────────────────────────┘ └─────────────────┘     │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Invalid→400/405 │ NotFound→404 │ Write→500   │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Report missing store configuration (never fatal)
    3. Build the DynamoDB client unless a store was injected
    Shutdown:
    1. Close the DynamoDB client
"""

import logging
import sys
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from songs_api import __version__
from songs_api.config import settings
from songs_api.exceptions import (
    InvalidRequestError,
    MethodNotAllowedError,
    SongNotFoundError,
    SongsApiError,
    StoreWriteError,
)
from songs_api.middleware.logging import RequestLoggingMiddleware
from songs_api.middleware.request_id import RequestIDLogFilter, RequestIDMiddleware
from songs_api.routes import health, songs
from songs_api.services.song_store import SongStore, UnavailableSongStore, connect_dynamodb

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    What:    Root logger to stdout at LOG_LEVEL with one consistent format.
             Every line carries the request ID ("-" outside a request).
    When:    Called once during app startup (before ANY other initialization).
    """
    log_format = "%(asctime)s [%(levelname)s] [%(request_id)s] %(name)s: %(message)s"

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDLogFilter())

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    # boto logs every request/credential lookup at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("aiobotocore").setLevel(logging.WARNING)
    logging.getLogger("aioboto3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Manage application lifecycle: store client construction and teardown.

    An injected store (create_app(song_store=...)) is used as-is. Otherwise
    one DynamoDB client is built here and closed on shutdown. If it cannot
    be built, the app keeps serving with UnavailableSongStore so every
    store call fails at request time.
    """
    setup_logging()
    logger.info("Songs API %s starting up...", __version__)

    try:
        settings.report_missing_store_settings()
    except ValueError as e:
        # Don't exit: requests fail at call time with the usual responses
        logger.error("Configuration error: %s", str(e))

    async with AsyncExitStack() as stack:
        if getattr(app.state, "song_store", None) is None:
            try:
                app.state.song_store = await stack.enter_async_context(
                    connect_dynamodb(settings)
                )
            except Exception as e:
                logger.error("Could not build the DynamoDB client: %s", str(e))
                app.state.song_store = UnavailableSongStore(reason=str(e))

        logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

        yield

        logger.info("Songs API shutting down...")

    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for the fixed error responses.

    Handler hierarchy:
        InvalidRequestError   → exc.status_code (400, or 405 for methods)  {"error": ...}
        HTTPException 405     → same as MethodNotAllowedError on /songs
        SongNotFoundError     → 404  {"message": "couldn't find the title"}
        StoreWriteError       → 500  {"error": "couldn't insert data"}
        SongsApiError (base)  → 500  {"error": ...}
        Exception (fallback)  → 500  {"error": ...}

    Security: store errors are logged server-side only, never in the body.
    """

    @app.exception_handler(InvalidRequestError)
    async def handle_invalid_request(request: Request, exc: InvalidRequestError):
        """Client sent an incomplete request or used an unsupported method."""
        logger.warning("Validation error: %s", exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """
        Methods the router rejects before the validator runs (OPTIONS, TRACE,
        HEAD, custom verbs) answer like the ones it does see.
        """
        if exc.status_code == 405 and request.url.path == songs.SONGS_PATH:
            return await handle_invalid_request(request, MethodNotAllowedError(request.method))
        return await http_exception_handler(request, exc)

    @app.exception_handler(SongNotFoundError)
    async def handle_not_found(request: Request, exc: SongNotFoundError):
        """No song for the title, or the lookup failed; same response either way."""
        logger.info("Song not found (%s)", exc.reason)
        return JSONResponse(
            status_code=404,
            content={"message": exc.message},
        )

    @app.exception_handler(StoreWriteError)
    async def handle_store_write_error(request: Request, exc: StoreWriteError):
        """Write not acknowledged. Generic message, details logged."""
        logger.error("Store write error | Context: %s", exc.context)
        return JSONResponse(
            status_code=500,
            content={"error": exc.message},
        )

    @app.exception_handler(SongsApiError)
    async def handle_app_error(request: Request, exc: SongsApiError):
        logger.error("Application error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for truly unexpected errors.

        Security: Stack trace is logged server-side ONLY (never in response).
        """
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "An unexpected error occurred"},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(song_store: Optional[SongStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        song_store: Store to serve requests with. When None, the lifespan
                    builds a DynamoDB-backed store from settings.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Songs API",
        description="Look up songs by title and store new songs in DynamoDB.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    if song_store is not None:
        app.state.song_store = song_store

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(songs.router)
    app.include_router(health.router)

    return app


# uvicorn expects `songs_api.main:app` to be importable
app = create_app()
