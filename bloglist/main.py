"""
Bloglist Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() returns a configured FastAPI instance; `app` at module
       level is what uvicorn serves (uvicorn bloglist.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────────┐ ┌─────────────────┐  │
    │  │ Req ID   │→│  Rate Limit  │→│  Logging        │  │
    │  └──────────┘ └──────────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  /api/login  /api/users  /api/blogs  /health        │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ Auth→401 │ NotFound→404 │ 429/500 │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional, Tuple, Type

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from bloglist import __version__
from bloglist.config import settings
from bloglist.database import dispose_engine
from bloglist.exceptions import (
    AuthenticationError,
    BloglistError,
    DatabaseError,
    NotFoundError,
    RateLimitExceededError,
    ValidationError,
)
from bloglist.middleware.logging import RequestLoggingMiddleware
from bloglist.middleware.rate_limit import RateLimitMiddleware, SlidingWindowLimiter
from bloglist.middleware.request_id import RequestIDMiddleware, request_id_var
from bloglist.routes import auth, blogs, health, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the whole application.

    Format: 2024-01-15T12:00:00 [INFO] bloglist.services.blog_service: message
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  configure logging, check security-critical settings.
    Shutdown: dispose the database engine.

    Schema creation is left to Alembic (`alembic upgrade head`).
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Bloglist backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: the API still runs, but tokens use the dev key
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Bloglist backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

# Most specific class first; `expose` says whether the context goes out as `details`
_ERROR_MAP: Tuple[Tuple[Type[BloglistError], int, str, bool], ...] = (
    (ValidationError, 400, "validation_error", True),
    (AuthenticationError, 401, "unauthorized", False),
    (NotFoundError, 404, "not_found", False),
    (RateLimitExceededError, 429, "rate_limit_exceeded", True),
    (DatabaseError, 500, "server_error", False),
)

GENERIC_500 = "An internal error occurred. Please try again later."


def _error_body(error: str, message: str, details: dict | None = None) -> dict:
    body = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        body["details"] = details
    return body


def _classify(exc: BloglistError) -> Tuple[int, str, bool]:
    for cls, status_code, error, expose in _ERROR_MAP:
        if isinstance(exc, cls):
            return status_code, error, expose
    return 500, "server_error", False


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to HTTP status codes and JSON bodies.

        RequestValidationError  → 400 (missing/invalid body fields)
        BloglistError subclass  → per _ERROR_MAP
        Exception (fallback)    → 500

    401 responses carry WWW-Authenticate: Bearer, 429 responses Retry-After.
    5xx bodies carry a generic message; the detail goes to the log only.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        fields = [
            ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            for err in exc.errors()
        ]
        fields = [f for f in fields if f]
        message = f"invalid or missing fields: {', '.join(fields)}" if fields else "invalid request body"
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), fields)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", message, {"fields": fields}),
        )

    @app.exception_handler(BloglistError)
    async def handle_app_error(request: Request, exc: BloglistError):
        status_code, error, expose = _classify(exc)
        rid = request_id_var.get("")

        if status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
            message = GENERIC_500
        else:
            logger.warning("[%s] %s %s: %s", rid, request.method, request.url.path, exc.message)
            message = exc.message

        headers = {}
        if isinstance(exc, AuthenticationError):
            headers["WWW-Authenticate"] = "Bearer"
        elif isinstance(exc, RateLimitExceededError):
            headers["Retry-After"] = str(exc.retry_after)

        return JSONResponse(
            status_code=status_code,
            content=_error_body(error, message, exc.context if expose else None),
            headers=headers or None,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Runs in ServerErrorMiddleware, outside RequestIDMiddleware
        rid = getattr(request.state, "request_id", None) or request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        body = _error_body("internal_server_error", GENERIC_500)
        body["request_id"] = rid
        return JSONResponse(
            status_code=500,
            content=body,
            headers={"X-Request-ID": rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(rate_limiter: Optional[SlidingWindowLimiter] = None) -> FastAPI:
    """
    Assemble middleware, exception handlers and routers into a FastAPI app.

    Args:
        rate_limiter: Limiter for RateLimitMiddleware; defaults to one built
                      from settings
    """
    app = FastAPI(
        title="Bloglist API",
        description=(
            "Save links to interesting blog posts, like them, and manage them "
            "with token-based authentication."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in reverse order of addition:
    # RequestID → RateLimit → Logging → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RateLimitMiddleware, limiter=rate_limiter)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(blogs.router)
    app.include_router(health.router)

    return app


app = create_app()
