# src/vidtube/infrastructure/repositories/tweet_repository.py
"""
Tweet Repository
"""

from typing import List, Tuple
from sqlalchemy import select, func, desc
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from .base import BaseRepository
from vidtube.app.models import Tweet, Like

logger = logging.getLogger(__name__)


class TweetRepository(BaseRepository[Tweet]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Tweet)

    async def get_by_owner(
        self, owner_id: str, skip: int = 0, limit: int = 10
    ) -> List[Tuple[Tweet, int]]:
        """Tweets of a user, newest first, with like counts"""
        try:
            like_counts = (
                select(Like.tweet_id, func.count(Like.id).label("likes"))
                .where(Like.tweet_id.is_not(None))
                .group_by(Like.tweet_id)
                .subquery()
            )
            result = await self.session.execute(
                select(Tweet, func.coalesce(like_counts.c.likes, 0))
                .outerjoin(like_counts, like_counts.c.tweet_id == Tweet.id)
                .where(Tweet.owner_id == owner_id)
                .order_by(desc(Tweet.created_at), desc(Tweet.id))
                .offset(skip)
                .limit(limit)
            )
            return [(tweet, int(likes)) for tweet, likes in result.all()]
        except Exception as e:
            logger.error(f"❌ Failed to get tweets by owner: {e}")
            raise


__all__ = ["TweetRepository"]
