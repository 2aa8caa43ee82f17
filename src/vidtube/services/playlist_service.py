"""
Playlist Service
Named, ordered video collections owned by a user
"""

from typing import Dict, List, Optional, Tuple

from vidtube.app.models import Playlist, User, Video
from vidtube.infrastructure.repositories import (
    PlaylistRepository,
    UserRepository,
    VideoRepository,
)
from vidtube.services.base_service import BaseService
from vidtube.services.exceptions import (
    ResourceConflictError,
    ResourceNotFoundError,
    ValidationError,
)


class PlaylistService(BaseService):
    """
    Playlist operations service

    Handles:
    - Create, rename and delete (owner only)
    - Membership changes; duplicates conflict, absent removals are not found
    - Listing a user's playlists with video counts
    """

    def __init__(
        self,
        playlist_repo: PlaylistRepository,
        video_repo: VideoRepository,
        user_repo: UserRepository,
        config=None,
    ):
        super().__init__(config=config)
        self.playlist_repo = playlist_repo
        self.video_repo = video_repo
        self.user_repo = user_repo

    def get_service_name(self) -> str:
        return "playlist"

    async def _get(self, playlist_id: str) -> Playlist:
        playlist_id = self.validate_id(playlist_id, "playlistId")
        playlist = await self.playlist_repo.get_by_id(playlist_id)
        if playlist is None:
            raise ResourceNotFoundError("Playlist", playlist_id, message="Playlist not found")
        return playlist

    async def _get_owned(self, playlist_id: str, user: User) -> Playlist:
        playlist = await self._get(playlist_id)
        self.ensure_owner(playlist.owner_id, user.id, "Playlist")
        return playlist

    # ========================================================================
    # CRUD
    # ========================================================================

    async def create_playlist(self, user: User, name: str, description: str = "") -> Playlist:
        self.validate_required(name, "name")
        playlist = await self.playlist_repo.create(
            name=name.strip(), description=(description or "").strip(), owner_id=user.id
        )
        self.log_info(f"✅ Created playlist {playlist.id} for {user.username}")
        return playlist

    async def get_user_playlists(
        self, user_id: str, page=None, limit=None
    ) -> Tuple[List[Playlist], Dict[str, int]]:
        """
        Playlists of a user, newest first

        Returns:
            Tuple of (playlists, {playlist_id: video_count})
        """
        user_id = self.validate_id(user_id, "userId")
        if not await self.user_repo.exists(user_id):
            raise ResourceNotFoundError("User", user_id, message="User not found")

        skip, limit = self.calculate_pagination(page, limit)
        playlists = await self.playlist_repo.get_by_owner(user_id, skip=skip, limit=limit)
        counts = await self.playlist_repo.count_videos([p.id for p in playlists])
        return playlists, counts

    async def get_playlist(
        self, playlist_id: str, viewer: Optional[User] = None
    ) -> Tuple[Playlist, List[Video]]:
        """
        A playlist and its videos in the order they were added

        Unpublished member videos are hidden from everyone but their owner.
        """
        playlist = await self._get(playlist_id)
        videos = await self.playlist_repo.get_videos(playlist.id)
        viewer_id = viewer.id if viewer else None
        visible = [v for v in videos if v.is_published or v.owner_id == viewer_id]
        return playlist, visible

    async def update_playlist(
        self,
        playlist_id: str,
        user: User,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Playlist:
        playlist = await self._get_owned(playlist_id, user)

        changes = {}
        if name is not None:
            self.validate_required(name, "name")
            changes["name"] = name.strip()
        if description is not None:
            changes["description"] = description.strip()
        if not changes:
            raise ValidationError("name or description is required")

        updated = await self.playlist_repo.update(playlist.id, **changes)
        if updated is None:
            raise ResourceNotFoundError("Playlist", playlist.id, message="Playlist not found")
        return updated

    async def delete_playlist(self, playlist_id: str, user: User) -> None:
        playlist = await self._get_owned(playlist_id, user)
        await self.playlist_repo.delete(playlist.id)

    # ========================================================================
    # Membership
    # ========================================================================

    async def add_video(self, playlist_id: str, video_id: str, user: User) -> Playlist:
        """
        Append a video

        Raises:
            ResourceConflictError: Video already in the playlist
        """
        playlist = await self._get_owned(playlist_id, user)
        video_id = self.validate_id(video_id, "videoId")
        if await self.video_repo.get_visible(video_id, user.id) is None:
            raise ResourceNotFoundError("Video", video_id, message="Video not found")

        conflict = ResourceConflictError("Video already exists in playlist")
        if await self.playlist_repo.has_video(playlist.id, video_id):
            raise conflict
        # A concurrent add can still win the insert
        if not await self.playlist_repo.add_video(playlist.id, video_id):
            raise conflict
        return playlist

    async def remove_video(self, playlist_id: str, video_id: str, user: User) -> Playlist:
        """
        Remove a video

        Raises:
            ResourceNotFoundError: Video is not in the playlist
        """
        playlist = await self._get_owned(playlist_id, user)
        video_id = self.validate_id(video_id, "videoId")

        if not await self.playlist_repo.remove_video(playlist.id, video_id):
            raise ResourceNotFoundError(
                "Video", video_id, message="Video does not exist in playlist"
            )
        return playlist
