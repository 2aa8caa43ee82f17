"""
Like Service
Toggle likes on videos, comments and tweets
"""

from typing import List

from vidtube.app.models import User, Video
from vidtube.infrastructure.repositories import (
    BaseRepository,
    CommentRepository,
    LikeRepository,
    TweetRepository,
    VideoRepository,
)
from vidtube.services.base_service import BaseService
from vidtube.services.exceptions import ResourceNotFoundError
from vidtube.services.toggle_service import ToggleRelationEngine, ToggleResult


class LikeService(BaseService):
    """
    Like toggling

    Each target kind has its own like repository; the target's existence is
    checked before the relation is flipped.
    """

    def __init__(
        self,
        video_likes: LikeRepository,
        comment_likes: LikeRepository,
        tweet_likes: LikeRepository,
        video_repo: VideoRepository,
        comment_repo: CommentRepository,
        tweet_repo: TweetRepository,
        config=None,
    ):
        super().__init__(config=config)
        self.video_likes = video_likes
        self.comment_likes = comment_likes
        self.tweet_likes = tweet_likes
        self.video_repo = video_repo
        self.comment_repo = comment_repo
        self.tweet_repo = tweet_repo

    def get_service_name(self) -> str:
        return "like"

    async def _toggle(
        self,
        likes: LikeRepository,
        targets: BaseRepository,
        resource_type: str,
        target_id: str,
        user: User,
    ) -> ToggleResult:
        target_id = self.validate_id(target_id, f"{resource_type.lower()}Id")
        if not await targets.exists(target_id):
            raise ResourceNotFoundError(
                resource_type, target_id, message=f"{resource_type} not found"
            )
        return await ToggleRelationEngine(likes).toggle(user.id, target_id)

    async def toggle_video_like(self, video_id: str, user: User) -> ToggleResult:
        """Unpublished videos can only be liked by their owner"""
        video_id = self.validate_id(video_id, "videoId")
        if await self.video_repo.get_visible(video_id, user.id) is None:
            raise ResourceNotFoundError("Video", video_id, message="Video not found")
        return await ToggleRelationEngine(self.video_likes).toggle(user.id, video_id)

    async def toggle_comment_like(self, comment_id: str, user: User) -> ToggleResult:
        return await self._toggle(
            self.comment_likes, self.comment_repo, "Comment", comment_id, user
        )

    async def toggle_tweet_like(self, tweet_id: str, user: User) -> ToggleResult:
        return await self._toggle(self.tweet_likes, self.tweet_repo, "Tweet", tweet_id, user)

    async def get_liked_videos(self, user: User) -> List[Video]:
        return await self.video_likes.get_liked_videos(user.id)
