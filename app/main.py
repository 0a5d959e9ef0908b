# app/main.py

"""Blog CMS Backend - posts, featured posts, search and related posts."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse, Response
from fastapi.staticfiles import StaticFiles
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.configs import settings
from app.db import ping_db
from app.errors import (
    DatabaseError,
    PostError,
    UploadError,
    database_exception_handler,
    post_exception_handler,
    upload_exception_handler,
    validation_exception_handler,
)
from app.managers import (
    get_system_metrics,
    limiter,
    metrics_manager,
    rate_limit_exceeded_handler,
)
from app.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from app.routes import post_router
from app.schemas import HealthCheckResponse, ServicesStatus
from app.utils.helpers import today_str

app = FastAPI(
    title=settings.APP_NAME,
    description="Blog CMS Backend API",
    version="1.0.0",
    lifespan=lifespan,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
# Behind a reverse proxy in production
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

if settings.STORAGE_PROVIDER == "local":
    settings.UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.UPLOADS_DIR), name="uploads")


routes = [post_router]

_ = [app.include_router(router) for router in routes]

errors = [
    (PostError, post_exception_handler),
    (UploadError, upload_exception_handler),
    (DatabaseError, database_exception_handler),
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (RequestValidationError, validation_exception_handler),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter
limiter: Limiter = app.state.limiter


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthCheckResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "version": "1.0.0",
                        "status": "ok",
                        "timestamp": "2025-01-01 09:30:00",
                        "services": {"database": "connected", "storage": "cloudinary"},
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> ORJSONResponse:
    """
    Health check endpoint.

    Parameters
    ----------
    request : Request
        Current request context.

    Returns
    -------
    ORJSONResponse
        Health status including database reachability.

    Examples
    --------
    Request
        GET /health
    Response
        200 OK
        {"version": "1.0.0", "status": "ok", "timestamp": "...", "services": { ... }}
    """
    db_ok = await ping_db()

    services = ServicesStatus(
        database="connected" if db_ok else "unavailable",
        storage=settings.STORAGE_PROVIDER,
    )

    response_data = HealthCheckResponse(
        version=app.version,
        status="ok" if db_ok else "degraded",
        timestamp=today_str(),
        services=services,
    )

    return ORJSONResponse(response_data.model_dump())


@app.get(
    "/metrics",
    tags=["📈 Metrics"],
    response_class=ORJSONResponse,
    summary="Get metrics",
    description="Get API performance metrics.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "timestamp": "2025-01-01 09:30:00",
                        "api_metrics": {
                            "endpoints": {
                                "/post/posts": {
                                    "requests": 10,
                                    "errors": 1,
                                    "error_rate": 0.1,
                                    "avg_response_time": 0.012,
                                },
                            },
                            "rate_limit_hits": 0,
                        },
                        "system_metrics": {"cpu_percent": 4.2},
                    },
                },
            },
        },
        429: {
            "description": "Rate limit exceeded",
            "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
        },
    },
    operation_id="get_metrics",
)
@limiter.limit("5/minute")
async def get_metrics(request: Request, response: Response) -> ORJSONResponse:
    """
    Get API performance metrics.

    Notes
    -----
    Rate limited to 5 requests per minute.
    """

    api_metrics = metrics_manager.get_metrics()
    system_metrics = await get_system_metrics()

    return ORJSONResponse(
        content={
            "timestamp": today_str(),
            "api_metrics": api_metrics,
            "system_metrics": system_metrics,
        },
    )


@app.get(
    "/",
    tags=["🏠 Root"],
    summary="Root access",
    response_model=dict[str, str],
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Welcome to Blog CMS Backend"},
                },
            },
        },
    },
    operation_id="root_access",
)
@limiter.limit("5/minute")
async def root(request: Request, response: Response) -> ORJSONResponse:
    """Root endpoint."""
    return ORJSONResponse(content={"message": f"Welcome to {settings.APP_NAME}"})
