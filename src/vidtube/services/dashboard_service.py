"""
Dashboard Service
Channel statistics for the signed-in owner
"""

from typing import Dict, List, Tuple

from vidtube.app.models import User, Video
from vidtube.infrastructure.repositories import ChannelRepository, VideoRepository
from vidtube.services.base_service import BaseService


class DashboardService(BaseService):
    """
    Channel dashboard

    Handles:
    - Aggregate totals (videos, views, subscribers, likes, comments)
    - Every upload of the channel with like counts
    """

    def __init__(self, channel_repo: ChannelRepository, video_repo: VideoRepository, config=None):
        super().__init__(config=config)
        self.channel_repo = channel_repo
        self.video_repo = video_repo

    def get_service_name(self) -> str:
        return "dashboard"

    async def get_channel_stats(self, user: User) -> Dict[str, int]:
        """Totals for the user's channel; an empty channel yields zeros"""
        try:
            return await self.channel_repo.get_channel_stats(user.id)
        except Exception as e:
            raise self.handle_error(e, "get_channel_stats", {"user_id": user.id})

    async def get_channel_videos(self, user: User) -> List[Tuple[Video, int]]:
        """Published and unpublished uploads, newest first, with like counts"""
        return await self.video_repo.get_by_owner_with_like_counts(user.id)
