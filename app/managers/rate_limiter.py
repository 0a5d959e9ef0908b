# app/managers/rate_limiter.py

"""Rate limiter configuration using slowapi."""

from logging import getLogger
from typing import cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from app.configs import LimiterConfig, file_logger
from app.managers.metrics import metrics_manager
from app.utils.helpers import host

logger = file_logger(getLogger(__name__))


def get_identifier(request: Request) -> str:
    """
    Get unique identifier for rate limiting.

    Uses API key from header if available, otherwise falls back to IP address.

    Args:
        request: FastAPI request object.

    Returns:
        Unique identifier string.
    """
    api_key = request.headers.get("X-API-Key")
    if api_key:
        return f"apikey:{api_key}"

    remote_address = get_remote_address(request)
    return f"ip:{remote_address}"


limiter = Limiter(**LimiterConfig().model_dump(), key_func=get_identifier)


async def close_limiter() -> None:
    """
    Close and cleanup limiter resources.

    This should be called during application shutdown.
    """
    limiter.reset()
    logger.info("Rate limiter shutdown complete")


async def rate_limit_exceeded_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle rate limit exceeded exceptions.

    Args:
        request: FastAPI request object.
        exc: RateLimitExceeded exception.

    Returns:
        JSON response with error details.
    """
    http_exc = cast(RateLimitExceeded, exc)
    metrics_manager.record_rate_limit_hit()
    logger.warning(f"Rate limit exceeded for ip: {host(request)} at {request.url.path}")

    response = ORJSONResponse(
        status_code=HTTP_429_TOO_MANY_REQUESTS,
        content={
            "detail": "Rate limit exceeded",
            "allowed_requests": http_exc.detail,
        },
    )
    view_rate_limit = getattr(request.state, "view_rate_limit", None)
    if view_rate_limit is not None:
        return request.app.state.limiter._inject_headers(response, view_rate_limit)  # noqa: SLF001
    return response
