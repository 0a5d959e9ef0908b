"""Post repository for database operations."""

from datetime import UTC, datetime
from logging import getLogger
from uuid import UUID

from sqlalchemy import delete, desc, select
from sqlalchemy.exc import DBAPIError

from app.configs import file_logger
from app.errors.database import DatabaseError
from app.models.post import PostDB, PostTagDB
from app.repositories.base import BaseRepository
from app.schemas.post import PostCreate, UploadedImage

logger = file_logger(getLogger(__name__))


def escape_like(value: str, escape: str = "\\") -> str:
    """
    Escape LIKE wildcards so the value matches literally.

    Args:
        value: Raw search text
        escape: Escape character used in the LIKE clause

    Returns:
        str: Text with ``%``, ``_`` and the escape character escaped
    """
    return (
        value.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )


def unique_tags(tags: list[str]) -> list[str]:
    """Drop repeated tags, keeping first occurrences in order."""
    return list(dict.fromkeys(tags))


class PostRepository(BaseRepository[PostDB]):
    """
    Repository for Post database operations.

    Keeps the `post_tags` index in step with `PostDB.tags` on every write.
    """

    model = PostDB

    async def create(
        self,
        post: PostCreate,
        thumbnail: UploadedImage | None = None,
    ) -> PostDB:
        """
        Create a new post in the database.

        Args:
            post: Validated post input
            thumbnail: Uploaded thumbnail to attach, if any

        Returns:
            PostDB: Created post

        Raises:
            DuplicateEntryError: If the slug already exists
            DatabaseError: For other database errors
        """
        db_post = PostDB(
            title=post.title,
            meta=post.meta,
            content=post.content,
            slug=post.slug,
            author=post.author,
            tags=post.tags,
        )
        if thumbnail:
            db_post.thumbnail_url = thumbnail.url
            db_post.thumbnail_public_id = thumbnail.public_id

        db_post = await self._add_and_refresh(db_post)
        await self._replace_tags(db_post.id, db_post.tags)
        return db_post

    async def get_by_slug(self, slug: str) -> PostDB | None:
        """
        Get post by slug.

        Args:
            slug: Post slug

        Returns:
            PostDB | None: Post if found, None otherwise
        """
        result = await self.session.execute(
            # pyrefly: ignore [bad-argument-type]
            select(PostDB).where(PostDB.slug == slug),
        )
        return result.scalar_one_or_none()

    async def slug_exists(self, slug: str, exclude_id: UUID | None = None) -> bool:
        """
        Check whether a slug is taken.

        Args:
            slug: Slug to look up
            exclude_id: Post allowed to own the slug (for updates)

        Returns:
            bool: True if another post uses the slug
        """
        # pyrefly: ignore [bad-argument-type]
        statement = select(PostDB.id).where(PostDB.slug == slug)
        if exclude_id is not None:
            # pyrefly: ignore [bad-argument-type]
            statement = statement.where(PostDB.id != exclude_id)
        result = await self.session.execute(statement.limit(1))
        return result.scalar_one_or_none() is not None

    async def get_all(self, skip: int = 0, limit: int = 10) -> list[PostDB]:
        """
        Get posts newest-first with offset pagination.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            list[PostDB]: Page of posts
        """
        query = (
            select(PostDB)
            # pyrefly: ignore [bad-argument-type]
            .order_by(desc(PostDB.created_at))
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def search_by_title(self, title: str) -> list[PostDB]:
        """
        Case-insensitive substring search on post titles.

        Args:
            title: Text to look for; wildcards are matched literally

        Returns:
            list[PostDB]: Matching posts, newest first
        """
        pattern = f"%{escape_like(title)}%"
        query = (
            select(PostDB)
            # pyrefly: ignore [missing-attribute]
            .where(PostDB.title.ilike(pattern, escape="\\"))
            # pyrefly: ignore [bad-argument-type]
            .order_by(desc(PostDB.created_at))
        )
        result = await self.session.execute(query)
        posts = list(result.scalars().all())
        logger.info(f"Found {len(posts)} posts matching title '{title}'")
        return posts

    async def get_related(self, post: PostDB, limit: int = 5) -> list[PostDB]:
        """
        Get other posts sharing at least one tag with the given post.

        Args:
            post: Post to find neighbours for
            limit: Maximum number of posts to return

        Returns:
            list[PostDB]: Related posts, newest first, never including `post`
        """
        if not post.tags:
            return []

        tagged = (
            select(PostTagDB.post_id)
            # pyrefly: ignore [missing-attribute]
            .where(PostTagDB.tag.in_(post.tags))
        )
        query = (
            select(PostDB)
            # pyrefly: ignore [missing-attribute]
            .where(PostDB.id.in_(tagged), PostDB.id != post.id)
            # pyrefly: ignore [bad-argument-type]
            .order_by(desc(PostDB.created_at))
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update(
        self,
        db_post: PostDB,
        post: PostCreate,
        thumbnail: UploadedImage | None = None,
    ) -> PostDB:
        """
        Overwrite every editable field of a post.

        Args:
            db_post: Post to update
            post: Validated replacement values
            thumbnail: New thumbnail; the current one is kept when None

        Returns:
            PostDB: Updated post
        """
        db_post.title = post.title
        db_post.meta = post.meta
        db_post.content = post.content
        db_post.slug = post.slug
        db_post.author = post.author
        db_post.tags = post.tags
        if thumbnail:
            db_post.thumbnail_url = thumbnail.url
            db_post.thumbnail_public_id = thumbnail.public_id
        db_post.updated_at = datetime.now(tz=UTC)

        db_post = await self._add_and_refresh(db_post)
        await self._replace_tags(db_post.id, db_post.tags)
        return db_post

    async def delete(self, post_id: UUID) -> bool:
        """
        Delete post by ID together with its tag index rows.

        Args:
            post_id: Post UUID

        Returns:
            bool: True if post was deleted, False if not found
        """
        db_post = await self.get_by_id(post_id)
        if not db_post:
            return False

        # pyrefly: ignore [bad-argument-type]
        await self.session.execute(delete(PostTagDB).where(PostTagDB.post_id == post_id))
        await self.session.delete(db_post)
        await self.session.flush()

        return True

    async def _replace_tags(self, post_id: UUID, tags: list[str]) -> None:
        # pyrefly: ignore [bad-argument-type]
        await self.session.execute(delete(PostTagDB).where(PostTagDB.post_id == post_id))
        self.session.add_all(PostTagDB(post_id=post_id, tag=tag) for tag in unique_tags(tags))
        try:
            await self.session.flush()
        except DBAPIError as e:
            await self.session.rollback()
            raise DatabaseError(detail=f"Failed to save tags: {e.orig or e}") from e
