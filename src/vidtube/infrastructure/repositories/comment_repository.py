# src/vidtube/infrastructure/repositories/comment_repository.py
"""
Comment Repository
Handles all comment-related database operations
"""

from typing import List, Tuple
from sqlalchemy import select, func, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import logging

from .base import BaseRepository
from vidtube.app.models import Comment, Like

logger = logging.getLogger(__name__)


class CommentRepository(BaseRepository[Comment]):
    """
    Repository for Comment operations
    """

    def __init__(self, session: AsyncSession):
        """Initialize comment repository"""
        super().__init__(session, Comment)

    async def get_by_video(
        self, video_id: str, skip: int = 0, limit: int = 10
    ) -> Tuple[List[Tuple[Comment, int]], int]:
        """
        Get comments for a video, newest first

        Args:
            video_id: Video ID
            skip: Pagination offset
            limit: Max results

        Returns:
            Tuple of ([(comment, like_count)], total comments on the video)
        """
        try:
            like_counts = (
                select(Like.comment_id, func.count(Like.id).label("likes"))
                .where(Like.comment_id.is_not(None))
                .group_by(Like.comment_id)
                .subquery()
            )
            result = await self.session.execute(
                select(Comment, func.coalesce(like_counts.c.likes, 0))
                .outerjoin(like_counts, like_counts.c.comment_id == Comment.id)
                .options(selectinload(Comment.owner))
                .where(Comment.video_id == video_id)
                .order_by(desc(Comment.created_at), desc(Comment.id))
                .offset(skip)
                .limit(limit)
            )
            rows = [(comment, int(likes)) for comment, likes in result.all()]
            total = await self.count(video_id=video_id)
            return rows, total
        except Exception as e:
            logger.error(f"❌ Failed to get comments by video: {e}")
            raise


__all__ = ["CommentRepository"]
