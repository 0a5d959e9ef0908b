"""Featured post registry backed by the ``featured_posts`` table."""

from logging import getLogger
from uuid import UUID

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.configs import file_logger, settings
from app.models.featured import FeaturedPostDB
from app.models.post import PostDB
from app.repositories.base import BaseRepository

logger = file_logger(getLogger(__name__))


class FeaturedRegistry(BaseRepository[FeaturedPostDB]):
    """
    Bounded, newest-first set of featured posts.

    Holds at most one entry per post and never more than ``capacity``
    entries once an insertion has returned: every successful `add` prunes
    the oldest entries beyond the cap before it completes.
    """

    model = FeaturedPostDB

    def __init__(self, session: AsyncSession, capacity: int | None = None) -> None:
        """
        Initialize the registry.

        Args:
            session: Async database session
            capacity: Maximum number of featured posts (defaults to
                `settings.FEATURED_POST_COUNT`)
        """
        super().__init__(session)
        self.capacity = capacity if capacity is not None else settings.FEATURED_POST_COUNT

    async def get_entry(self, post_id: UUID) -> FeaturedPostDB | None:
        result = await self.session.execute(
            # pyrefly: ignore [bad-argument-type]
            select(FeaturedPostDB).where(FeaturedPostDB.post_id == post_id),
        )
        return result.scalar_one_or_none()

    async def is_featured(self, post_id: UUID) -> bool:
        return await self.get_entry(post_id) is not None

    async def add(self, post_id: UUID) -> bool:
        """
        Feature a post.

        Args:
            post_id: Post to feature

        Returns:
            bool: True if a new entry was created, False if already featured
        """
        if await self.is_featured(post_id):
            return False

        await self._add_and_refresh(FeaturedPostDB(post_id=post_id))
        removed = await self.prune()
        if removed:
            logger.info(f"Pruned {removed} featured entries beyond the newest {self.capacity}")
        return True

    async def prune(self) -> int:
        """
        Delete every entry beyond the newest ``capacity`` ones.

        Returns:
            int: Number of entries removed
        """
        stale = (
            select(FeaturedPostDB.id)
            # pyrefly: ignore [bad-argument-type]
            .order_by(desc(FeaturedPostDB.created_at))
            .offset(self.capacity)
        )
        result = await self.session.execute(stale)
        stale_ids = list(result.scalars().all())
        if not stale_ids:
            return 0

        await self.session.execute(
            # pyrefly: ignore [missing-attribute]
            delete(FeaturedPostDB).where(FeaturedPostDB.id.in_(stale_ids)),
        )
        await self.session.flush()
        return len(stale_ids)

    async def remove(self, post_id: UUID) -> bool:
        """
        Un-feature a post.

        Args:
            post_id: Post to remove from the registry

        Returns:
            bool: True if an entry was deleted
        """
        entry = await self.get_entry(post_id)
        if not entry:
            return False

        await self.session.delete(entry)
        await self.session.flush()
        return True

    async def list_posts(self) -> list[PostDB]:
        """
        Featured posts, most recently featured first.

        Returns:
            list[PostDB]: Up to ``capacity`` posts
        """
        query = (
            select(PostDB)
            # pyrefly: ignore [bad-argument-type]
            .join(FeaturedPostDB, FeaturedPostDB.post_id == PostDB.id)
            # pyrefly: ignore [bad-argument-type]
            .order_by(desc(FeaturedPostDB.created_at))
            .limit(self.capacity)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())
