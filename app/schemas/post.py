"""
Post schemas.

Input validation for the create/update forms and one explicit view model per
endpoint projection, serialized with camelCase aliases.
"""

from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from app.configs.settings import (
    DEFAULT_AUTHOR,
    MAX_AUTHOR_LENGTH,
    MAX_META_LENGTH,
    MAX_SLUG_LENGTH,
    MAX_TAG_LENGTH,
    MAX_TAGS_COUNT,
    MAX_TITLE_LENGTH,
)


@dataclass(frozen=True, slots=True)
class UploadedImage:
    """Image accepted by the image store: public URL plus deletion handle."""

    url: str
    public_id: str


# post_tags.tag is VARCHAR(MAX_TAG_LENGTH)
Tag = Annotated[str, StringConstraints(max_length=MAX_TAG_LENGTH)]


class PostCreate(BaseModel):
    """Post fields submitted on create and update (update overwrites all of them)."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    title: str = Field(
        ...,
        min_length=1,
        max_length=MAX_TITLE_LENGTH,
        description="Post title",
        examples=["Getting Started with FastAPI"],
    )
    meta: str = Field(
        ...,
        min_length=1,
        max_length=MAX_META_LENGTH,
        description="Meta description",
        examples=["A short tour of path operations and dependencies"],
    )
    content: str = Field(
        ...,
        min_length=1,
        description="Post content",
    )
    slug: str = Field(
        ...,
        min_length=1,
        max_length=MAX_SLUG_LENGTH,
        description="Unique, URL-friendly identifier",
        examples=["getting-started-with-fastapi"],
    )
    author: str = Field(
        default=DEFAULT_AUTHOR,
        max_length=MAX_AUTHOR_LENGTH,
        description="Author name",
    )
    tags: list[Tag] = Field(
        default=[],
        max_length=MAX_TAGS_COUNT,
        description="Post tags",
        examples=[["python", "fastapi"]],
    )
    featured: bool = Field(default=False, description="Show in the featured list")

    @field_validator("slug", mode="after")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        """Reject slugs containing whitespace."""
        if any(ch.isspace() for ch in v):
            mssg = "Slug must not contain whitespace"
            raise ValueError(mssg)
        return v

    @field_validator("author", mode="after")
    @classmethod
    def default_blank_author(cls, v: str) -> str:
        return v or DEFAULT_AUTHOR


class PostSummary(BaseModel):
    """Projection used by create, featured and related listings."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    title: str
    meta: str
    slug: str
    thumbnail: str | None = None
    author: str


class PostListItem(PostSummary):
    """Projection used by the paginated list and search."""

    created_at: str = Field(alias="createdAt")
    tags: list[str] = []


class PostDetail(PostSummary):
    """Full projection returned after an update."""

    content: str
    featured: bool
    tags: list[str] = []


class PostFullDetail(PostDetail):
    """Full projection returned when fetching by slug."""

    created_at: str = Field(alias="createdAt")


class PostSummaryEnvelope(BaseModel):
    post: PostSummary


class PostDetailEnvelope(BaseModel):
    post: PostDetail


class PostFullDetailEnvelope(BaseModel):
    post: PostFullDetail


class PostSummaryList(BaseModel):
    posts: list[PostSummary]


class PostItemList(BaseModel):
    posts: list[PostListItem]


class PaginatedPosts(BaseModel):
    """Page of posts plus the total number of posts."""

    model_config = ConfigDict(populate_by_name=True)

    posts: list[PostListItem]
    post_count: int = Field(alias="postCount")


class MessageResponse(BaseModel):
    message: str


class ImageUploadResponse(BaseModel):
    image: str
