"""Database models for the application."""

from app.models.featured import FeaturedPostDB
from app.models.post import PostDB, PostTagDB

__all__ = ["FeaturedPostDB", "PostDB", "PostTagDB"]
