# src/vidtube/infrastructure/repositories/channel_repository.py
"""
Channel Repository
Read-only aggregations joining users, subscriptions, videos, likes and comments
"""

from typing import Any, Dict, Optional
from sqlalchemy import select, func, exists, and_
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from vidtube.app.models import User, Video, Subscription, Like, Comment

logger = logging.getLogger(__name__)


class ChannelRepository:
    """
    Repository for channel-level read models

    A channel is a user seen through its subscriptions and uploads.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # ========================================================================
    # Channel Profile
    # ========================================================================

    async def get_channel_profile(
        self, username: str, viewer_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Build the public profile of a channel

        Args:
            username: Channel username (case-insensitive)
            viewer_id: Requesting user, used for ``isSubscribed``

        Returns:
            Profile dictionary or None if no user has that username
        """
        try:
            subscribers_count = (
                select(func.count(Subscription.id))
                .where(Subscription.channel_id == User.id)
                .scalar_subquery()
            )
            subscribed_to_count = (
                select(func.count(Subscription.id))
                .where(Subscription.subscriber_id == User.id)
                .scalar_subquery()
            )
            if viewer_id:
                is_subscribed = exists().where(
                    and_(
                        Subscription.channel_id == User.id,
                        Subscription.subscriber_id == viewer_id,
                    )
                )
            else:
                is_subscribed = None

            columns = [
                User,
                subscribers_count.label("subscribers_count"),
                subscribed_to_count.label("subscribed_to_count"),
            ]
            if is_subscribed is not None:
                columns.append(is_subscribed.label("is_subscribed"))

            result = await self.session.execute(
                select(*columns).where(User.username == username.strip().lower())
            )
            row = result.first()
            if row is None:
                return None

            user = row[0]
            return {
                "id": user.id,
                "username": user.username,
                "fullname": user.fullname,
                "email": user.email,
                "avatar": user.avatar_url,
                "coverImage": user.cover_image_url,
                "subscribersCount": int(row.subscribers_count or 0),
                "channelsSubscribedToCount": int(row.subscribed_to_count or 0),
                "isSubscribed": bool(row.is_subscribed) if is_subscribed is not None else False,
            }
        except Exception as e:
            logger.error(f"❌ Failed to get channel profile: {e}")
            raise

    # ========================================================================
    # Dashboard Statistics
    # ========================================================================

    async def get_channel_stats(self, owner_id: str) -> Dict[str, int]:
        """
        Totals for a channel dashboard

        Every figure falls back to 0 when the channel has nothing to count.

        Args:
            owner_id: Channel (user) ID

        Returns:
            Dictionary with totalVideos, totalViews, totalSubscribers,
            totalLikes, totalVideoLikes, totalComments
        """
        try:
            video_stats = await self.session.execute(
                select(
                    func.count(Video.id).label("total_videos"),
                    func.coalesce(func.sum(Video.view_count), 0).label("total_views"),
                ).where(Video.owner_id == owner_id)
            )
            video_row = video_stats.first()

            total_subscribers = await self._scalar_count(
                select(func.count(Subscription.id)).where(Subscription.channel_id == owner_id)
            )
            total_likes = await self._scalar_count(
                select(func.count(Like.id)).where(Like.liked_by_id == owner_id)
            )
            total_video_likes = await self._scalar_count(
                select(func.count(Like.id))
                .join(Video, Like.video_id == Video.id)
                .where(Video.owner_id == owner_id)
            )
            total_comments = await self._scalar_count(
                select(func.count(Comment.id))
                .join(Video, Comment.video_id == Video.id)
                .where(Video.owner_id == owner_id)
            )

            return {
                "totalVideos": int(video_row.total_videos or 0) if video_row else 0,
                "totalViews": int(video_row.total_views or 0) if video_row else 0,
                "totalSubscribers": total_subscribers,
                "totalLikes": total_likes,
                "totalVideoLikes": total_video_likes,
                "totalComments": total_comments,
            }
        except Exception as e:
            logger.error(f"❌ Failed to get channel stats: {e}")
            raise

    async def _scalar_count(self, query) -> int:
        result = await self.session.execute(query)
        return int(result.scalar() or 0)


__all__ = ["ChannelRepository"]
