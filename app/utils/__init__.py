"""Utility helper functions."""

from app.utils.helpers import format_datetime, get_summary, host, parse_tags, today_str

__all__ = [
    "format_datetime",
    "get_summary",
    "host",
    "parse_tags",
    "today_str",
]
