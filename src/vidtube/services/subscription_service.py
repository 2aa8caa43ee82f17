"""
Subscription Service
"""

from typing import List

from vidtube.app.models import User
from vidtube.infrastructure.repositories import SubscriptionRepository, UserRepository
from vidtube.services.base_service import BaseService
from vidtube.services.exceptions import ResourceNotFoundError, ValidationError
from vidtube.services.toggle_service import ToggleRelationEngine, ToggleResult


class SubscriptionService(BaseService):
    """Channel subscriptions: toggle and both directions of listing"""

    def __init__(
        self, subscription_repo: SubscriptionRepository, user_repo: UserRepository, config=None
    ):
        super().__init__(config=config)
        self.subscription_repo = subscription_repo
        self.user_repo = user_repo
        self.engine = ToggleRelationEngine(subscription_repo)

    def get_service_name(self) -> str:
        return "subscription"

    async def _require_user(self, user_id: str, field_name: str, resource_type: str) -> str:
        user_id = self.validate_id(user_id, field_name)
        if not await self.user_repo.exists(user_id):
            raise ResourceNotFoundError(
                resource_type, user_id, message=f"{resource_type} not found"
            )
        return user_id

    async def toggle_subscription(self, channel_id: str, subscriber: User) -> ToggleResult:
        """
        Subscribe to or unsubscribe from a channel

        Raises:
            ValidationError: Malformed id or subscribing to oneself
            ResourceNotFoundError: Unknown channel
        """
        channel_id = await self._require_user(channel_id, "channelId", "Channel")
        if channel_id == subscriber.id:
            raise ValidationError("You cannot subscribe to your own channel", field="channelId")
        return await self.engine.toggle(subscriber.id, channel_id)

    async def get_channel_subscribers(self, channel_id: str, page=None, limit=None) -> List[User]:
        channel_id = await self._require_user(channel_id, "channelId", "Channel")
        skip, limit = self.calculate_pagination(page, limit)
        return await self.subscription_repo.get_subscribers(channel_id, skip=skip, limit=limit)

    async def get_subscribed_channels(
        self, subscriber_id: str, page=None, limit=None
    ) -> List[User]:
        subscriber_id = await self._require_user(subscriber_id, "subscriberId", "User")
        skip, limit = self.calculate_pagination(page, limit)
        return await self.subscription_repo.get_subscribed_channels(
            subscriber_id, skip=skip, limit=limit
        )
