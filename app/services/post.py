"""Post service: CRUD, featured list, search and related posts."""

from logging import getLogger
from uuid import UUID

from fastapi import UploadFile
from starlette.status import HTTP_401_UNAUTHORIZED

from app.configs import POST_REMOVED_MESSAGE, file_logger, settings
from app.errors.database import DatabaseError, DuplicateEntryError
from app.errors.post import (
    DuplicateSlugError,
    ImageMissingError,
    InvalidRequestError,
    PostNotFoundError,
    SearchQueryMissingError,
    ThumbnailRemovalError,
)
from app.errors.upload import StorageError
from app.models import PostDB
from app.repositories import FeaturedRegistry, PostRepository
from app.schemas.post import (
    ImageUploadResponse,
    MessageResponse,
    PaginatedPosts,
    PostCreate,
    PostDetail,
    PostFullDetail,
    PostListItem,
    PostSummary,
    UploadedImage,
)
from app.services.media import MediaService
from app.utils.helpers import format_datetime

logger = file_logger(getLogger(__name__))


def parse_post_id(post_id: str) -> UUID:
    """
    Parse a post id taken from the URL.

    Raises:
        InvalidRequestError: If the value is not a UUID
    """
    try:
        return UUID(post_id)
    except (ValueError, AttributeError, TypeError) as e:
        raise InvalidRequestError from e


def to_summary(post: PostDB) -> PostSummary:
    return PostSummary(
        id=post.id,
        title=post.title,
        meta=post.meta,
        slug=post.slug,
        thumbnail=post.thumbnail_url,
        author=post.author,
    )


def to_list_item(post: PostDB) -> PostListItem:
    return PostListItem(
        id=post.id,
        title=post.title,
        meta=post.meta,
        slug=post.slug,
        thumbnail=post.thumbnail_url,
        author=post.author,
        created_at=format_datetime(post.created_at),
        tags=post.tags,
    )


def to_detail(post: PostDB, featured: bool) -> PostDetail:
    return PostDetail(
        id=post.id,
        title=post.title,
        meta=post.meta,
        slug=post.slug,
        thumbnail=post.thumbnail_url,
        author=post.author,
        content=post.content,
        featured=featured,
        tags=post.tags,
    )


def to_full_detail(post: PostDB, featured: bool) -> PostFullDetail:
    return PostFullDetail(
        **to_detail(post, featured).model_dump(),
        created_at=format_datetime(post.created_at),
    )


class PostService:
    """
    Service orchestrating posts, the featured registry and the image store.

    Every method runs inside the caller's database session; remote image
    operations happen before the database writes they guard.
    """

    def __init__(
        self,
        repo: PostRepository,
        registry: FeaturedRegistry,
        media: MediaService,
    ) -> None:
        """
        Initialize the post service.

        Args:
            repo: Post repository
            registry: Featured post registry
            media: Image validation and storage
        """
        self.repo = repo
        self.registry = registry
        self.media = media

    async def _get_or_404(self, post_id: str) -> PostDB:
        post = await self.repo.get_by_id(parse_post_id(post_id))
        if not post:
            raise PostNotFoundError
        return post

    async def _discard_image(self, image: UploadedImage | None) -> None:
        """Delete an image stored for a write that did not persist."""
        if image is None:
            return
        try:
            removed = await self.media.destroy_image(image.public_id)
        except StorageError:
            removed = False
        if not removed:
            logger.warning(f"Could not remove orphaned image {image.public_id}")

    async def create(self, post: PostCreate, thumbnail: UploadFile | None = None) -> PostSummary:
        """
        Create a post, optionally with a thumbnail and a featured flag.

        Args:
            post: Validated post fields
            thumbnail: Optional thumbnail upload

        Returns:
            PostSummary: Created post

        Raises:
            DuplicateSlugError: If the slug is already taken
        """
        if await self.repo.slug_exists(post.slug):
            raise DuplicateSlugError(post.slug)

        image: UploadedImage | None = None
        if thumbnail:
            image = await self.media.upload_image(thumbnail)

        try:
            db_post = await self.repo.create(post, image)
            if post.featured:
                await self.registry.add(db_post.id)
        except DatabaseError as e:
            await self._discard_image(image)
            if isinstance(e, DuplicateEntryError):
                # lost a race with a concurrent create of the same slug
                raise DuplicateSlugError(post.slug) from e
            raise

        logger.info(f"Created post {db_post.id} ({db_post.slug})")
        return to_summary(db_post)

    async def update(
        self,
        post_id: str,
        post: PostCreate,
        thumbnail: UploadFile | None = None,
    ) -> PostDetail:
        """
        Overwrite a post; replace its thumbnail when a new file is given.

        Args:
            post_id: Post id from the URL
            post: Replacement field values
            thumbnail: Optional replacement thumbnail

        Returns:
            PostDetail: Updated post

        Raises:
            InvalidRequestError: If the id is malformed
            PostNotFoundError: If no post has this id
            DuplicateSlugError: If another post uses the new slug
            ThumbnailRemovalError: If the old thumbnail could not be deleted (401)
        """
        db_post = await self._get_or_404(post_id)

        if await self.repo.slug_exists(post.slug, exclude_id=db_post.id):
            raise DuplicateSlugError(post.slug)

        image: UploadedImage | None = None
        if thumbnail:
            file_data, content_type = await self.media.validate_image(thumbnail)
            if db_post.thumbnail_public_id and not await self.media.destroy_image(
                db_post.thumbnail_public_id,
            ):
                raise ThumbnailRemovalError(status_code=HTTP_401_UNAUTHORIZED)
            image = await self.media.store_image(file_data, content_type)

        try:
            db_post = await self.repo.update(db_post, post, image)
            if post.featured:
                await self.registry.add(db_post.id)
            else:
                await self.registry.remove(db_post.id)
        except DatabaseError as e:
            await self._discard_image(image)
            if isinstance(e, DuplicateEntryError):
                raise DuplicateSlugError(post.slug) from e
            raise

        logger.info(f"Updated post {db_post.id}")
        return to_detail(db_post, featured=post.featured)

    async def delete(self, post_id: str) -> MessageResponse:
        """
        Delete a post, its thumbnail and its featured entry.

        The post is kept when the image store does not confirm the
        thumbnail deletion.

        Raises:
            InvalidRequestError: If the id is malformed
            PostNotFoundError: If no post has this id
            ThumbnailRemovalError: If the thumbnail could not be deleted (404)
        """
        db_post = await self._get_or_404(post_id)

        if db_post.thumbnail_public_id and not await self.media.destroy_image(
            db_post.thumbnail_public_id,
        ):
            raise ThumbnailRemovalError

        await self.registry.remove(db_post.id)
        await self.repo.delete(db_post.id)

        logger.info(f"Deleted post {db_post.id}")
        return MessageResponse(message=POST_REMOVED_MESSAGE)

    async def get_by_slug(self, slug: str) -> PostFullDetail:
        if not slug or not slug.strip():
            raise InvalidRequestError

        post = await self.repo.get_by_slug(slug)
        if not post:
            raise PostNotFoundError

        return to_full_detail(post, featured=await self.registry.is_featured(post.id))

    async def list_posts(self, page_no: int = 0, limit: int | None = None) -> PaginatedPosts:
        """
        Get one page of posts, newest first.

        Args:
            page_no: Zero-based page number
            limit: Page size (defaults to `settings.DEFAULT_PAGE_SIZE`)

        Returns:
            PaginatedPosts: Page of posts plus total post count
        """
        if limit is None:
            limit = settings.DEFAULT_PAGE_SIZE
        posts = await self.repo.get_all(skip=page_no * limit, limit=limit)
        total = await self.repo.count()
        return PaginatedPosts(posts=[to_list_item(p) for p in posts], post_count=total)

    async def list_featured(self) -> list[PostSummary]:
        return [to_summary(p) for p in await self.registry.list_posts()]

    async def search(self, title: str | None) -> list[PostListItem]:
        """
        Case-insensitive title search.

        Raises:
            SearchQueryMissingError: If the query is empty or whitespace
        """
        if not title or not title.strip():
            raise SearchQueryMissingError

        return [to_list_item(p) for p in await self.repo.search_by_title(title)]

    async def related(self, post_id: str) -> list[PostSummary]:
        """
        Get up to `settings.RELATED_POST_COUNT` posts sharing a tag.

        Raises:
            InvalidRequestError: If the id is malformed
            PostNotFoundError: If no post has this id
        """
        post = await self._get_or_404(post_id)
        posts = await self.repo.get_related(post, limit=settings.RELATED_POST_COUNT)
        return [to_summary(p) for p in posts]

    async def upload_image(self, file: UploadFile | None) -> ImageUploadResponse:
        """
        Store a standalone image (used inside post content).

        Raises:
            ImageMissingError: If no file was sent
        """
        if file is None or not file.filename:
            raise ImageMissingError

        image = await self.media.upload_image(file)
        logger.info(f"Uploaded post image {image.public_id}")
        return ImageUploadResponse(image=image.url)
