"""Post database models using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import JSON, DateTime, Index, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String

from app.configs.settings import (
    DEFAULT_AUTHOR,
    MAX_AUTHOR_LENGTH,
    MAX_META_LENGTH,
    MAX_SLUG_LENGTH,
    MAX_TAG_LENGTH,
    MAX_TITLE_LENGTH,
)


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


class PostDB(SQLModel, table=True):
    """
    Post database model.

    This model represents the posts table. Tags are kept as an ordered JSON
    list for responses and mirrored into `post_tags` for tag lookups.
    """

    __tablename__ = cast("declared_attr[str]", "posts")

    __table_args__ = (Index("ix_posts_created_at", "created_at"),)

    # Primary key
    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Post ID",
    )

    # Required fields
    title: str = Field(
        sa_column=Column(String(MAX_TITLE_LENGTH), nullable=False),
        description="Post title",
    )
    meta: str = Field(
        sa_column=Column(String(MAX_META_LENGTH), nullable=False),
        description="Meta description",
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Post content (markdown or HTML)",
    )
    slug: str = Field(
        sa_column=Column(String(MAX_SLUG_LENGTH), unique=True, nullable=False, index=True),
        description="URL-friendly slug (unique)",
    )
    author: str = Field(
        default=DEFAULT_AUTHOR,
        sa_column=Column(String(MAX_AUTHOR_LENGTH), nullable=False),
        description="Author name",
    )

    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON().with_variant(JSONB, "postgresql"), nullable=False),
        description="Post tags in submission order",
    )

    # Thumbnail hosted by the image store
    thumbnail_url: str | None = Field(
        default=None,
        sa_column=Column(String(500)),
        description="Thumbnail URL",
    )
    thumbnail_public_id: str | None = Field(
        default=None,
        sa_column=Column(String(255)),
        description="Image store handle used to delete the thumbnail",
    )

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "title": "Getting Started with FastAPI",
                "meta": "A short tour of path operations and dependencies",
                "content": "FastAPI is a modern web framework...",
                "slug": "getting-started-with-fastapi",
                "author": "Admin",
                "tags": ["python", "fastapi"],
                "thumbnail_url": "https://res.cloudinary.com/demo/image/upload/sample.jpg",
            },
        },
    )


class PostTagDB(SQLModel, table=True):
    """One row per (post, tag) pair; the index behind related-post lookups."""

    __tablename__ = cast("declared_attr[str]", "post_tags")

    post_id: UUID = Field(
        sa_column=Column(
            "post_id",
            ForeignKey("posts.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    tag: str = Field(
        sa_column=Column(String(MAX_TAG_LENGTH), primary_key=True, index=True),
    )
