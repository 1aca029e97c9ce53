"""
NoteTaker Backend: FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, the failure policy, routes and the
       static file mount; the lifespan owns the database engine.
Who:   uvicorn (`uvicorn notetaker.main:app`) and `python -m notetaker`.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:   Request ID → Request Logging         │
    │                                                     │
    │  Routes:       GET/POST /notes, GET /notes/{id},    │
    │                POST /notes/reset, GET /health       │
    │                                                     │
    │  Static:       PUBLIC_DIR mounted at /              │
    │                                                     │
    │  Failures:     any error → 500, fixed text body     │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, build the engine (connection pool),
              optionally create the schema, attach NoteService to app.state
    Shutdown: dispose the engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from notetaker import __version__
from notetaker.config import Settings, settings
from notetaker.database import build_engine, create_schema, dispose_engine
from notetaker.exceptions import NoteTakerError
from notetaker.middleware.logging import RequestLoggingMiddleware
from notetaker.middleware.request_id import RequestIDMiddleware, request_id_var
from notetaker.routes import health, notes
from notetaker.services.note_service import NoteService

logger = logging.getLogger(__name__)

FAILURE_TEXT = "Something went wrong"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for the whole application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s on stdout.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Own the connection pool for the lifetime of the process.

    The engine is created exactly once here and injected into NoteService;
    nothing else opens connections to the store.
    """
    config: Settings = app.state.settings

    setup_logging(config.log_level)
    logger.info("NoteTaker Backend %s starting up...", __version__)

    engine = build_engine(config)
    if config.db_create_tables:
        await create_schema(engine)

    app.state.engine = engine
    app.state.note_service = NoteService(engine)

    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)

    yield

    logger.info("NoteTaker Backend shutting down...")
    await dispose_engine(engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Failure Policy
# ══════════════════════════════════════════════════════════════════════════

def failure_response(exc: Exception) -> PlainTextResponse:
    """
    Log `exc` and build the one response every failure gets.

    Application errors are logged with their context; anything else is
    logged with its traceback. The client always receives HTTP 500 with
    FAILURE_TEXT and nothing about the cause.
    """
    rid = request_id_var.get("")
    if isinstance(exc, NoteTakerError):
        logger.error(
            "[%s] %s: %s | Context: %s",
            rid,
            type(exc).__name__,
            exc.message,
            exc.context,
        )
    else:
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
    return PlainTextResponse(FAILURE_TEXT, status_code=500)


async def handle_failure(request: Request, exc: Exception) -> PlainTextResponse:
    return failure_response(exc)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Route application errors and unexpected exceptions to the failure policy.

    NoteTakerError is handled inside the middleware stack, so its 500 still
    carries X-Request-ID and gets an access-log line.

    Why the Exception handler too: anything the persistence layer did not
    wrap (a driver bug, a serialization error) would otherwise reach the
    client as Starlette's default error page. Starlette runs this handler in
    its outermost middleware, so those responses skip the request ID.
    """
    app.add_exception_handler(NoteTakerError, handle_failure)
    app.add_exception_handler(Exception, handle_failure)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings to run with; defaults to the process-wide `settings`.
    """
    config = config or settings

    app = FastAPI(
        title="NoteTaker API",
        description="Create, list, fetch and reset notes.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config

    # Last added runs first: RequestID → Logging → routes
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(health.router)

    # Mounted last so API routes take precedence over files
    public_dir = Path(config.public_dir)
    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=public_dir, html=True), name="public")
    else:
        logger.info("Public directory %s not found; static files disabled", public_dir)

    return app


app = create_app()
