from collections.abc import MutableMapping
from datetime import UTC, datetime
from time import perf_counter
from typing import Any

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from orjson import JSONDecodeError, loads
from starlette.routing import BaseRoute, Match, Route

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def today_str() -> str:
    """Return today's date as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(DATE_FORMAT)


def time_taken(start_time: float) -> str:
    minutes, seconds = divmod(perf_counter() - start_time, 60)
    formatted_time = f"{int(minutes)}m {int(seconds)}s"

    return formatted_time


def get_summary(request: Request) -> str | None:
    """Extract route summary from request."""

    scope: MutableMapping[str, Any] = request.scope
    app: FastAPI = scope["app"]
    routes: list[BaseRoute] = app.routes

    summary = None
    for route in routes:
        is_api_route = type(route) is APIRoute
        is_route = type(route) is Route
        if is_api_route and route.matches(scope)[0] == Match.FULL:
            summary = route.summary
            break
        if is_route and route.matches(scope)[0] == Match.FULL:
            summary = route.name
            break

    return summary


def format_datetime(value: datetime) -> str:
    """
    Format a stored timestamp for responses.

    Args:
        value: Timestamp as loaded from the database

    Returns:
        str: ISO 8601 timestamp in UTC, e.g. ``2025-01-01T12:00:00+00:00``
    """
    # SQLite hands timestamps back without tzinfo; they were stored as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def parse_tags(raw: str | list[str] | None) -> list[str]:
    """
    Normalize the ``tags`` form value into a list of tag strings.

    Accepts a JSON array string (what the admin frontend sends), a
    comma-separated string, or an already-split list. Blank tags are dropped
    and order is preserved.

    Args:
        raw: Raw form value

    Returns:
        list[str]: Tags in submission order

    Raises:
        ValueError: If a JSON array string cannot be decoded or holds non-strings
    """
    if raw is None:
        return []

    if isinstance(raw, list):
        items = raw
    else:
        text = raw.strip()
        if not text:
            return []
        if text.startswith("["):
            try:
                items = loads(text)
            except JSONDecodeError as e:
                mssg = f"Tags must be a JSON array of strings: {e}"
                raise ValueError(mssg) from e
            if not isinstance(items, list) or not all(isinstance(t, str) for t in items):
                mssg = "Tags must be a JSON array of strings"
                raise ValueError(mssg)
        else:
            items = text.split(",")

    return [tag.strip() for tag in items if tag.strip()]
