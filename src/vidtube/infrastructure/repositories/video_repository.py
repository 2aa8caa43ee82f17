# src/vidtube/infrastructure/repositories/video_repository.py
"""
Video Repository
Handles all video-related database operations
"""

from typing import List, Optional, Tuple
from sqlalchemy import select, func, update, asc, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import logging

from .base import BaseRepository
from vidtube.app.models import Video, Like

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "created_at": Video.created_at,
    "createdAt": Video.created_at,
    "view_count": Video.view_count,
    "views": Video.view_count,
    "duration_seconds": Video.duration_seconds,
    "duration": Video.duration_seconds,
    "title": Video.title,
}


def _contains_pattern(text: str) -> str:
    """LIKE pattern matching ``text`` literally anywhere in a column"""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class VideoRepository(BaseRepository[Video]):
    """
    Repository for Video operations
    Provides listing, search and counter updates
    """

    def __init__(self, session: AsyncSession):
        """Initialize video repository"""
        super().__init__(session, Video)

    # ========================================================================
    # Video Retrieval Methods
    # ========================================================================

    async def get_by_id_with_owner(self, video_id: str) -> Optional[Video]:
        """
        Get video with its owner loaded

        Args:
            video_id: Video ID

        Returns:
            Video or None
        """
        try:
            result = await self.session.execute(
                select(Video).options(selectinload(Video.owner)).where(Video.id == video_id)
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"❌ Failed to get video with owner: {e}")
            raise

    async def get_visible(self, video_id: str, viewer_id: Optional[str]) -> Optional[Video]:
        """Video by ID, or None when missing or unpublished for this viewer"""
        video = await self.get_by_id(video_id)
        if video is None or not video.is_visible_to(viewer_id):
            return None
        return video

    async def search(
        self,
        query: Optional[str] = None,
        owner_id: Optional[str] = None,
        published_only: bool = True,
        sort_by: str = "created_at",
        sort_type: str = "desc",
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Video], int]:
        """
        Search videos by title/description with filters and pagination

        Args:
            query: Case-insensitive text matched against title and description
            owner_id: Restrict to one channel
            published_only: Hide unpublished videos
            sort_by: Sort field (created_at, view_count, duration_seconds, title)
            sort_type: asc or desc
            skip: Pagination offset
            limit: Max results

        Returns:
            Tuple of (videos, total matching count)
        """
        try:
            conditions = []
            if query:
                pattern = _contains_pattern(query)
                conditions.append(
                    Video.title.ilike(pattern, escape="\\")
                    | Video.description.ilike(pattern, escape="\\")
                )
            if owner_id:
                conditions.append(Video.owner_id == owner_id)
            if published_only:
                conditions.append(Video.is_published.is_(True))

            column = SORTABLE_FIELDS.get(sort_by, Video.created_at)
            direction = asc if sort_type == "asc" else desc

            result = await self.session.execute(
                select(Video)
                .options(selectinload(Video.owner))
                .where(*conditions)
                .order_by(direction(column), desc(Video.id))
                .offset(skip)
                .limit(limit)
            )
            videos = list(result.scalars().all())

            total = await self.session.execute(
                select(func.count(Video.id)).where(*conditions)
            )
            return videos, int(total.scalar() or 0)
        except Exception as e:
            logger.error(f"❌ Failed to search videos: {e}")
            raise

    async def get_by_owner_with_like_counts(self, owner_id: str) -> List[Tuple[Video, int]]:
        """
        Every video of a channel, newest first, with its like count

        Args:
            owner_id: Channel (user) ID

        Returns:
            List of (video, like_count)
        """
        try:
            like_counts = (
                select(Like.video_id, func.count(Like.id).label("likes"))
                .where(Like.video_id.is_not(None))
                .group_by(Like.video_id)
                .subquery()
            )
            result = await self.session.execute(
                select(Video, func.coalesce(like_counts.c.likes, 0))
                .outerjoin(like_counts, like_counts.c.video_id == Video.id)
                .where(Video.owner_id == owner_id)
                .order_by(desc(Video.created_at))
            )
            return [(video, int(likes)) for video, likes in result.all()]
        except Exception as e:
            logger.error(f"❌ Failed to get channel videos: {e}")
            raise

    # ========================================================================
    # Counters & Status
    # ========================================================================

    async def increment_views(self, video_id: str) -> Optional[Video]:
        """Atomically add one view and return the reloaded video"""
        try:
            await self.session.execute(
                update(Video)
                .where(Video.id == video_id)
                .values(view_count=Video.view_count + 1)
                .execution_options(synchronize_session=False)
            )
            await self.session.commit()
            return await self.session.get(
                Video, video_id, populate_existing=True, options=[selectinload(Video.owner)]
            )
        except Exception as e:
            await self.session.rollback()
            logger.error(f"❌ Failed to increment views: {e}")
            raise

    async def toggle_published(self, video_id: str) -> Optional[Video]:
        """Flip is_published in a single statement and return the fresh row"""
        try:
            await self.session.execute(
                update(Video)
                .where(Video.id == video_id)
                .values(is_published=~Video.is_published)
                .execution_options(synchronize_session=False)
            )
            await self.session.commit()
            return await self.session.get(Video, video_id, populate_existing=True)
        except Exception as e:
            await self.session.rollback()
            logger.error(f"❌ Failed to toggle publish status: {e}")
            raise


# ============================================================================
# Export
# ============================================================================

__all__ = ["VideoRepository"]
