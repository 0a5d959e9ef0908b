"""Repository layer for database operations."""

from app.repositories.featured import FeaturedRegistry
from app.repositories.post import PostRepository

__all__ = ["FeaturedRegistry", "PostRepository"]
