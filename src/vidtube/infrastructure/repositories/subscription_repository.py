# src/vidtube/infrastructure/repositories/subscription_repository.py
"""
Subscription Repository
"""

from typing import List
from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from .relation_repository import RelationRepository
from vidtube.app.models import Subscription, User

logger = logging.getLogger(__name__)


class SubscriptionRepository(RelationRepository[Subscription]):
    """Keyed by (subscriber_id, channel_id)"""

    def __init__(self, session: AsyncSession):
        super().__init__(
            session,
            Subscription,
            actor_field="subscriber_id",
            target_field="channel_id",
            kind="subscription",
        )

    async def get_subscribers(self, channel_id: str, skip: int = 0, limit: int = 100) -> List[User]:
        """Users subscribed to a channel, newest subscription first"""
        try:
            result = await self.session.execute(
                select(User)
                .join(Subscription, Subscription.subscriber_id == User.id)
                .where(Subscription.channel_id == channel_id)
                .order_by(desc(Subscription.created_at))
                .offset(skip)
                .limit(limit)
            )
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"❌ Failed to get subscribers: {e}")
            raise

    async def get_subscribed_channels(
        self, subscriber_id: str, skip: int = 0, limit: int = 100
    ) -> List[User]:
        """Channels a user follows, newest subscription first"""
        try:
            result = await self.session.execute(
                select(User)
                .join(Subscription, Subscription.channel_id == User.id)
                .where(Subscription.subscriber_id == subscriber_id)
                .order_by(desc(Subscription.created_at))
                .offset(skip)
                .limit(limit)
            )
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"❌ Failed to get subscribed channels: {e}")
            raise


__all__ = ["SubscriptionRepository"]
