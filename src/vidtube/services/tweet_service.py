"""
Tweet Service
"""

from typing import List, Tuple

from vidtube.app.models import Tweet, User
from vidtube.infrastructure.repositories import TweetRepository, UserRepository
from vidtube.services.base_service import BaseService
from vidtube.services.exceptions import ResourceNotFoundError


class TweetService(BaseService):
    def __init__(self, tweet_repo: TweetRepository, user_repo: UserRepository, config=None):
        super().__init__(config=config)
        self.tweet_repo = tweet_repo
        self.user_repo = user_repo

    def get_service_name(self) -> str:
        return "tweet"

    async def create_tweet(self, user: User, content: str) -> Tweet:
        self.validate_required(content, "content")
        return await self.tweet_repo.create(owner_id=user.id, content=content.strip())

    async def get_user_tweets(self, user_id: str, page=None, limit=None) -> List[Tuple[Tweet, int]]:
        user_id = self.validate_id(user_id, "userId")
        if not await self.user_repo.exists(user_id):
            raise ResourceNotFoundError("User", user_id, message="User not found")
        skip, limit = self.calculate_pagination(page, limit)
        return await self.tweet_repo.get_by_owner(user_id, skip=skip, limit=limit)

    async def _get_owned(self, tweet_id: str, user: User) -> Tweet:
        tweet_id = self.validate_id(tweet_id, "tweetId")
        tweet = await self.tweet_repo.get_by_id(tweet_id)
        if tweet is None:
            raise ResourceNotFoundError("Tweet", tweet_id, message="Tweet not found")
        self.ensure_owner(tweet.owner_id, user.id, "Tweet")
        return tweet

    async def update_tweet(self, tweet_id: str, user: User, content: str) -> Tweet:
        self.validate_required(content, "content")
        tweet = await self._get_owned(tweet_id, user)
        updated = await self.tweet_repo.update(tweet.id, content=content.strip())
        if updated is None:
            raise ResourceNotFoundError("Tweet", tweet.id, message="Tweet not found")
        return updated

    async def delete_tweet(self, tweet_id: str, user: User) -> None:
        tweet = await self._get_owned(tweet_id, user)
        await self.tweet_repo.delete(tweet.id)
