# src/vidtube/infrastructure/repositories/playlist_repository.py
"""
Playlist Repository
Playlists and their ordered video membership
"""

from datetime import datetime
from typing import List
from sqlalchemy import select, delete, func, asc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import logging

from .base import BaseRepository
from vidtube.app.models import Playlist, PlaylistVideo, Video

logger = logging.getLogger(__name__)


class PlaylistRepository(BaseRepository[Playlist]):
    """
    Repository for Playlist operations
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session, Playlist)

    async def get_by_owner(self, owner_id: str, skip: int = 0, limit: int = 10) -> List[Playlist]:
        return await self.find_by(skip=skip, limit=limit, owner_id=owner_id)

    async def get_videos(self, playlist_id: str) -> List[Video]:
        """
        Member videos in the order they were added

        Args:
            playlist_id: Playlist ID

        Returns:
            Videos with owners loaded
        """
        try:
            result = await self.session.execute(
                select(Video)
                .join(PlaylistVideo, PlaylistVideo.video_id == Video.id)
                .where(PlaylistVideo.playlist_id == playlist_id)
                .options(selectinload(Video.owner))
                .order_by(asc(PlaylistVideo.added_at))
            )
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"❌ Failed to get playlist videos: {e}")
            raise

    async def count_videos(self, playlist_ids: List[str]) -> dict:
        """Map playlist id -> number of videos"""
        if not playlist_ids:
            return {}
        result = await self.session.execute(
            select(PlaylistVideo.playlist_id, func.count(PlaylistVideo.video_id))
            .where(PlaylistVideo.playlist_id.in_(playlist_ids))
            .group_by(PlaylistVideo.playlist_id)
        )
        return {playlist_id: int(count) for playlist_id, count in result.all()}

    async def has_video(self, playlist_id: str, video_id: str) -> bool:
        entry = await self.session.get(PlaylistVideo, (playlist_id, video_id))
        return entry is not None

    async def add_video(self, playlist_id: str, video_id: str) -> bool:
        """
        Append a video to the playlist

        Returns:
            False if the video was already a member
        """
        try:
            self.session.add(
                PlaylistVideo(playlist_id=playlist_id, video_id=video_id, added_at=datetime.utcnow())
            )
            await self.session.commit()
            logger.info(f"✅ Added video {video_id} to playlist {playlist_id}")
            return True
        except IntegrityError:
            await self.session.rollback()
            if not await self.has_video(playlist_id, video_id):
                raise
            return False
        except Exception as e:
            await self.session.rollback()
            logger.error(f"❌ Failed to add video to playlist: {e}")
            raise

    async def remove_video(self, playlist_id: str, video_id: str) -> bool:
        """
        Remove a video from the playlist

        Returns:
            False if the video was not a member
        """
        try:
            result = await self.session.execute(
                delete(PlaylistVideo).where(
                    PlaylistVideo.playlist_id == playlist_id,
                    PlaylistVideo.video_id == video_id,
                )
            )
            await self.session.commit()
            return (result.rowcount or 0) > 0
        except Exception as e:
            await self.session.rollback()
            logger.error(f"❌ Failed to remove video from playlist: {e}")
            raise


__all__ = ["PlaylistRepository"]
