# src/vidtube/infrastructure/repositories/like_repository.py
"""
Like Repository
Likes on videos, comments and tweets
"""

from typing import List, Literal
from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import logging

from .relation_repository import RelationRepository
from vidtube.app.models import Like, Video

logger = logging.getLogger(__name__)

LikeTarget = Literal["video", "comment", "tweet"]


class LikeRepository(RelationRepository[Like]):
    """
    Repository for Like operations

    One instance handles one target kind; the key is (liked_by_id, <target>_id).
    """

    def __init__(self, session: AsyncSession, target: LikeTarget = "video"):
        super().__init__(
            session,
            Like,
            actor_field="liked_by_id",
            target_field=f"{target}_id",
            kind=f"{target}-like",
        )
        self.target = target

    async def get_liked_videos(self, user_id: str) -> List[Video]:
        """
        Videos liked by a user, most recently liked first

        Args:
            user_id: Liking user

        Returns:
            Published videos with owners loaded
        """
        try:
            result = await self.session.execute(
                select(Video)
                .join(Like, Like.video_id == Video.id)
                .where(Like.liked_by_id == user_id, Video.is_published.is_(True))
                .options(selectinload(Video.owner))
                .order_by(desc(Like.created_at))
            )
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"❌ Failed to get liked videos: {e}")
            raise


__all__ = ["LikeRepository", "LikeTarget"]
