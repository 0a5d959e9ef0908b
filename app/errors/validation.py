"""Custom validation error handling for FastAPI."""

from logging import getLogger
from typing import cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_422_UNPROCESSABLE_CONTENT

from app.configs import file_logger
from app.utils.helpers import host

logger = file_logger(getLogger(__name__))


def format_errors(errors: list[dict], skip_location: int = 1) -> list[dict]:
    """
    Flatten pydantic error dicts into a JSON-safe list.

    Args:
        errors: Errors as returned by ``exc.errors()``
        skip_location: Leading ``loc`` entries to drop (e.g. ``body``/``query``)

    Returns:
        list[dict]: Errors with ``field``, ``message``, ``type`` and, where
        available, ``input`` and ``context``
    """
    formatted_errors = []
    for error in errors:
        formatted_error = {
            "field": ".".join(str(loc) for loc in error.get("loc", [])[skip_location:]),
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type", "validation_error"),
        }
        if "input" in error:
            formatted_error["input"] = error["input"]
        # ctx may hold exception instances (e.g. ValueError)
        if "ctx" in error:
            formatted_error["context"] = {
                key: str(value) if isinstance(value, Exception) else value
                for key, value in error["ctx"].items()
            }
        formatted_errors.append(formatted_error)
    return formatted_errors


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle Pydantic validation errors with cleaner response format.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with formatted validation errors.
    """
    exec_error = cast(RequestValidationError, exc)
    formatted_errors = format_errors(list(exec_error.errors()))

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: {formatted_errors}",
    )

    return ORJSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_CONTENT,
        content={
            "detail": "Validation failed",
            "errors": formatted_errors,
        },
    )
