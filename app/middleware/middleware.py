# app/middleware/middleware.py
"""
Middleware and lifespan for the blog backend.

This module contains middleware for security headers, request logging and
CORS handling, plus the lifespan event handler that connects the database
on startup and releases it on shutdown.
"""

from asyncio import get_event_loop
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import ERROR, INFO, WARNING, basicConfig, getLogger
from time import perf_counter

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from rich.logging import RichHandler
from rich.traceback import install
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from uvloop import Loop

from app.configs import file_logger, settings
from app.db import close_db, init_db
from app.managers.rate_limiter import close_limiter
from app.utils.helpers import get_summary, host

# --- Logging Configuration ---
basicConfig(
    level=settings.LOG_LEVEL,
    format="%(message)s",
    datefmt="%X",
    handlers=[RichHandler(rich_tracebacks=True)],
)
logger = file_logger(getLogger("rich"))

install()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Create tables and report the configured backends; release them on shutdown."""
    logger.info(f"Starting {app.title} ({settings.ENVIRONMENT})")

    try:
        await init_db()
    except Exception:
        logger.exception("Failed to initialize the database")
        raise

    if settings.STORAGE_PROVIDER == "local":
        logger.info(f"Image store: local, serving {settings.UPLOADS_DIR} at /uploads")
    else:
        logger.info(f"Image store: cloudinary, folder {settings.CLOUDINARY_FOLDER!r}")
    logger.info(
        f"Featured posts capped at {settings.FEATURED_POST_COUNT}, "
        f"related posts at {settings.RELATED_POST_COUNT}",
    )
    if settings.LOG_TO_FILE:
        logger.info(f"Logging to file: {settings.LOG_FILE}")
    logger.info(f"is uvloop: {type(get_event_loop()) is Loop}")

    yield

    logger.info(f"Shutting down {app.title}...")
    try:
        await close_limiter()
        await close_db()
    except Exception:
        logger.exception("Error during shutdown")


def configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware for the application."""
    # Admin and public frontends in development
    allowed_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    if frontend_url := settings.PRODUCTION_FRONTEND_URL:
        allowed_origins.append(frontend_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log each request and its outcome; 4xx as warnings, 5xx as errors."""

        start_time = perf_counter()
        route_info = get_summary(request) or f"{request.method} {request.url.path}"
        logger.info(f"Request: {route_info}, from ip: {host(request)}")

        response = await call_next(request)
        duration = perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{duration:.4f}"

        status = response.status_code
        level = ERROR if status >= 500 else WARNING if status >= 400 else INFO
        logger.log(
            level,
            f"Response: {status} for {request.method} {request.url.path} in {duration:.2f}s",
        )

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Add security headers to all responses."""

        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if settings.ENVIRONMENT == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response
