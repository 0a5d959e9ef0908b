"""Featured post database model using SQLModel."""

from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel

from app.models.post import utcnow


class FeaturedPostDB(SQLModel, table=True):
    """
    Featured post registry entry.

    At most one entry per post; the registry keeps only the newest entries
    (see `FeaturedRegistry`).
    """

    __tablename__ = cast("declared_attr[str]", "featured_posts")

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Entry ID",
    )
    post_id: UUID = Field(
        sa_column=Column(
            "post_id",
            ForeignKey("posts.id", ondelete="CASCADE"),
            unique=True,
            nullable=False,
        ),
        description="Featured post ID (foreign key to posts.id)",
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="When the post was featured",
    )
