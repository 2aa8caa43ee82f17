"""
Video Service
Business logic for video operations
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from vidtube.app.models import User, Video
from vidtube.infrastructure.clients.media_client import MediaStore
from vidtube.infrastructure.repositories import (
    LikeRepository,
    UserRepository,
    VideoRepository,
)
from vidtube.services.base_service import BaseService
from vidtube.services.exceptions import (
    MediaUploadError,
    ResourceNotFoundError,
    ValidationError,
)

SORT_FIELDS = ("created_at", "view_count", "duration_seconds", "title")
SORT_TYPES = ("asc", "desc")


class VideoService(BaseService):
    """
    Video operations service

    Handles:
    - Publishing with media upload
    - Listing, search and sorting
    - Viewing (view counter and watch history)
    - Owner-only updates, deletion and publish toggling
    """

    def __init__(
        self,
        video_repo: VideoRepository,
        user_repo: UserRepository,
        like_repo: LikeRepository,
        media: MediaStore,
        config=None,
    ):
        super().__init__(config=config)
        self.video_repo = video_repo
        self.user_repo = user_repo
        self.like_repo = like_repo
        self.media = media

    def get_service_name(self) -> str:
        return "video"

    # ========================================================================
    # Listing
    # ========================================================================

    async def list_videos(
        self,
        viewer: Optional[User] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        query: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_type: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Tuple[List[Video], int]:
        """
        List videos with search, filters and pagination

        Unpublished videos are only included when a channel lists its own
        uploads.

        Returns:
            Tuple of (videos, total matching)
        """
        skip, limit = self.calculate_pagination(page, limit)

        sort_by = sort_by or "created_at"
        sort_type = (sort_type or "desc").lower()
        if sort_by not in SORT_FIELDS:
            raise ValidationError(
                f"sortBy must be one of {', '.join(SORT_FIELDS)}", field="sortBy"
            )
        if sort_type not in SORT_TYPES:
            raise ValidationError("sortType must be asc or desc", field="sortType")

        owner_id = self.validate_id(user_id, "userId") if user_id else None
        own_channel = viewer is not None and owner_id == viewer.id

        return await self.video_repo.search(
            query=query.strip() if query else None,
            owner_id=owner_id,
            published_only=not own_channel,
            sort_by=sort_by,
            sort_type=sort_type,
            skip=skip,
            limit=limit,
        )

    # ========================================================================
    # Publish
    # ========================================================================

    async def publish_video(
        self,
        owner: User,
        title: str,
        description: str,
        video_path: Optional[Path],
        thumbnail_path: Optional[Path],
    ) -> Video:
        """
        Upload media and create the video record

        No record is written unless both uploads succeed; when the thumbnail
        fails the already uploaded video asset is removed.

        Raises:
            ValidationError: Missing fields or files
            MediaUploadError: Media host failed
        """
        self.validate_required(title, "title")
        self.validate_required(description, "description")
        if video_path is None:
            raise ValidationError("Video file is required", field="videoFile")
        if thumbnail_path is None:
            raise ValidationError("Thumbnail is required", field="thumbnail")

        video_asset = await self.media.upload(video_path)
        if video_asset is None:
            raise MediaUploadError("Failed to upload video file")

        thumbnail = await self.media.upload(thumbnail_path)
        if thumbnail is None:
            await self.media.delete(video_asset.public_id, resource_type="video")
            raise MediaUploadError("Failed to upload thumbnail")

        try:
            video = await self.video_repo.create(
                owner_id=owner.id,
                title=title.strip(),
                description=description.strip(),
                video_url=video_asset.url,
                video_public_id=video_asset.public_id,
                thumbnail_url=thumbnail.url,
                thumbnail_public_id=thumbnail.public_id,
                duration_seconds=int(round(video_asset.duration or 0)),
                is_published=True,
            )
        except Exception as e:
            await self.media.delete(video_asset.public_id, resource_type="video")
            await self.media.delete(thumbnail.public_id)
            raise self.handle_error(e, "publish_video", {"owner_id": owner.id})

        self.log_info(f"✅ Published video {video.id} by {owner.username}")
        return await self._load(video.id)

    # ========================================================================
    # Read
    # ========================================================================

    async def _load(self, video_id: str) -> Video:
        video = await self.video_repo.get_by_id_with_owner(video_id)
        if video is None:
            raise ResourceNotFoundError("Video", video_id, message="Video not found")
        return video

    async def _get_visible(self, video_id: str, viewer: Optional[User]) -> Video:
        video_id = self.validate_id(video_id, "videoId")
        video = await self._load(video_id)
        if not video.is_visible_to(viewer.id if viewer else None):
            raise ResourceNotFoundError("Video", video_id, message="Video not found")
        return video

    async def get_video(self, video_id: str, viewer: Optional[User] = None) -> Dict[str, Any]:
        """
        Fetch a video for viewing

        An authenticated viewer adds one view and moves the video to the
        front of their watch history.

        Returns:
            Dictionary with ``video``, ``likes_count`` and ``is_liked``
        """
        video = await self._get_visible(video_id, viewer)

        is_liked = False
        if viewer is not None:
            video = await self.video_repo.increment_views(video.id) or video
            await self.user_repo.record_watch(viewer.id, video.id)
            is_liked = await self.like_repo.find_relation(viewer.id, video.id) is not None

        return {
            "video": video,
            "likes_count": await self.like_repo.count_for_target(video.id),
            "is_liked": is_liked,
        }

    # ========================================================================
    # Owner Operations
    # ========================================================================

    async def _get_owned(self, video_id: str, user: User) -> Video:
        video_id = self.validate_id(video_id, "videoId")
        video = await self._load(video_id)
        self.ensure_owner(video.owner_id, user.id, "Video")
        return video

    async def update_video(
        self,
        video_id: str,
        user: User,
        title: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail_path: Optional[Path] = None,
    ) -> Video:
        """
        Update title, description and/or thumbnail

        Raises:
            ValidationError: Nothing to update or blank fields
            ResourceNotFoundError: Unknown video
            PermissionDeniedError: Not the owner
            MediaUploadError: Thumbnail upload failed
        """
        video = await self._get_owned(video_id, user)

        changes: Dict[str, Any] = {}
        if title is not None:
            self.validate_required(title, "title")
            changes["title"] = title.strip()
        if description is not None:
            self.validate_required(description, "description")
            changes["description"] = description.strip()
        if not changes and thumbnail_path is None:
            raise ValidationError("title, description or thumbnail is required")

        video_id = video.id
        previous_thumbnail = None
        thumbnail = None
        if thumbnail_path is not None:
            thumbnail = await self.media.upload(thumbnail_path)
            if thumbnail is None:
                raise MediaUploadError("Failed to upload thumbnail")
            previous_thumbnail = video.thumbnail_public_id
            changes["thumbnail_url"] = thumbnail.url
            changes["thumbnail_public_id"] = thumbnail.public_id

        try:
            await self.video_repo.update(video_id, **changes)
        except Exception as e:
            if thumbnail is not None:
                await self.media.delete(thumbnail.public_id)
            raise self.handle_error(e, "update_video", {"video_id": video_id})

        if previous_thumbnail:
            await self.media.delete(previous_thumbnail)

        return await self._load(video_id)

    async def delete_video(self, video_id: str, user: User) -> None:
        """Delete the record (comments, likes, memberships cascade) and its media"""
        video = await self._get_owned(video_id, user)
        video_public_id, thumbnail_public_id = video.video_public_id, video.thumbnail_public_id

        await self.video_repo.delete(video.id)

        if video_public_id:
            await self.media.delete(video_public_id, resource_type="video")
        if thumbnail_public_id:
            await self.media.delete(thumbnail_public_id)
        self.log_info(f"🗑️ Deleted video {video.id}")

    async def toggle_publish_status(self, video_id: str, user: User) -> Video:
        video = await self._get_owned(video_id, user)
        toggled = await self.video_repo.toggle_published(video.id)
        if toggled is None:
            raise ResourceNotFoundError("Video", video.id, message="Video not found")
        self.log_info(f"Video {video.id} published={toggled.is_published}")
        return toggled
