"""
api/main.py -- FastAPI application entry point for the Bookshelf API.

Run with:  python main.py
           uvicorn api.main:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware -- adds CORS headers for allowed browser origins
  2. log_requests   -- one log line per request with status and latency

Lifespan builds every long-lived object once at startup from Settings and
hangs it on app.state; shutdown disposes the database engines:
  app.state.user_store  -- UserStore
  app.state.book_store  -- BookStore
  app.state.tokens      -- TokenService (signing secret + TTL)
  app.state.accounts    -- AccountService (register / login)

Tests swap the lifespan for one that wires in-memory stores and a test
secret (see tests/conftest.py).
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from api.routes.books import router as books_router
from auth.service import AccountService
from auth.store import UserStore
from auth.tokens import TokenService
from books.store import BookStore
from core.config import get_settings
from core.errors import AppError, ValidationError

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("bookshelf.api")

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build stores and services on startup; release them on shutdown.

    Settings are read here, once. The signing secret flows into TokenService
    through its constructor and is never stored anywhere else.
    """
    settings = get_settings()
    logger.info("Bookshelf API starting up")
    app.state.user_store = UserStore(settings.database_url)
    app.state.book_store = BookStore(settings.database_url)
    app.state.tokens = TokenService(settings.secret_key, settings.token_ttl_seconds)
    app.state.accounts = AccountService(
        app.state.user_store,
        app.state.tokens,
        bcrypt_rounds=settings.bcrypt_rounds,
        uniform_login_errors=settings.uniform_login_errors,
    )
    logger.info(
        "Stores initialized (token_ttl=%ss, bcrypt_rounds=%s)",
        settings.token_ttl_seconds,
        settings.bcrypt_rounds,
    )

    yield

    app.state.book_store.close()
    app.state.user_store.close()
    logger.info("Bookshelf API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Bookshelf API",
    description="User registration, login and a personal book collection.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, tags=["Auth"])
app.include_router(books_router, tags=["Books"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse body ({message, code}) so clients
# can parse errors uniformly. None of them ever echoes an exception's internal
# text for a 5xx.
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str, code: str, detail: str | None = None) -> JSONResponse:
    response = JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message, code=code, detail=detail).model_dump(exclude_none=True),
    )
    response.headers["Cache-Control"] = "no-store"
    return response


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error(exc.status_code, exc.message, exc.code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when the request body, path or query fails validation.

    detail lists the offending field locations only -- never the submitted
    values, which may include a password.
    """
    fields = sorted({".".join(str(part) for part in err.get("loc", ())[1:]) or "body" for err in exc.errors()})
    error = ValidationError("Bad Request: Missing required fields.")
    return _error(error.status_code, error.message, error.code, ", ".join(fields))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Structured body for framework-raised errors (unknown route, wrong method)."""
    return _error(exc.status_code, str(exc.detail), f"http_{exc.status_code}")


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is written to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "An unexpected error occurred.", "internal_error")


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly in main.py (not in a router) so it is always reachable
# and never behind the auth gate.
# ---------------------------------------------------------------------------


@app.get("/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return liveness, version, and whether the database answers."""
    try:
        request.app.state.user_store.ping()
        database = "ok"
    except Exception:
        logger.exception("Health check: database ping failed")
        database = "error"
    return HealthResponse(
        status="healthy" if database == "ok" else "degraded",
        version=__version__,
        components={"app": "ok", "database": database},
    )
