"""
World API Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app(settings) returns a configured FastAPI
       instance that owns its own Database.
Who:   uvicorn (`uvicorn worldapi.main:app`) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐              │
    │  │ Req ID   │→│ Access Log  │→│ CORS │              │
    │  └──────────┘ └─────────────┘ └──────┘              │
    │                                                     │
    │  Routes:                                            │
    │  /cities  /signup  /login  /me  /world  /health     │
    │                                                     │
    │  Exception Handlers:                                │
    │  400 │ 401 │ 404 │ 409 │ 500 (store/hash/session)   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check, optional schema creation
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from worldapi import __version__
from worldapi.config import Settings, get_settings
from worldapi.database import Database
from worldapi.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
    WorldApiError,
)
from worldapi.middleware.logging import RequestLoggingMiddleware
from worldapi.middleware.request_id import RequestIDMiddleware, request_id_var
from worldapi.routes import auth, cities, health, world

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, on stdout.
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-operation chatter from libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings)
    logger.info("World API %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving; development setups run with the defaults
        logger.warning("%s", str(e))

    if settings.create_schema_on_startup:
        await database.create_all()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("World API shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(exc: WorldApiError) -> Response:
    """
    Build the client response for an application error.

    Only `exc.body` reaches the client. `message` and `context` stay in logs.
    """
    if exc.body is None:
        return Response(status_code=exc.status_code)
    if exc.json_body:
        return JSONResponse(status_code=exc.status_code, content={"message": exc.body})
    return PlainTextResponse(exc.body, status_code=exc.status_code)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP responses.

    Handler hierarchy:
        ValidationError      → 400 (text or {"message": ...})
        AuthenticationError  → 401 (empty or "please login")
        NotFoundError        → 404 (empty)
        ConflictError        → 409 ("Username is already used")
        WorldApiError (base) → 500 (DatabaseError, PasswordHashError, SessionError)
        Exception (fallback) → 500 (empty)
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.info("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return error_response(exc)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        logger.info("[%s] Authentication failed: %s", request_id_var.get(""), exc.message)
        return error_response(exc)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(exc)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.info("[%s] Conflict: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return error_response(exc)

    @app.exception_handler(WorldApiError)
    async def handle_server_error(request: Request, exc: WorldApiError):
        logger.error(
            "[%s] %s: %s | Context: %s",
            request_id_var.get(""),
            type(exc).__name__,
            exc.message,
            exc.context,
        )
        return error_response(exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return Response(status_code=500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit configuration; read from the environment when omitted.

    Returns:
        FastAPI instance with its Database on `app.state.database`.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="World API",
        description=(
            "Countries and cities lookup with username/password login "
            "backed by server-side sessions."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = Database(settings)

    # Middleware executes in reverse order of addition
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(cities.router)
    app.include_router(auth.router)
    app.include_router(world.router)
    app.include_router(health.router)

    return app


app = create_app()
