"""
Comment Service
"""

from typing import List, Optional, Tuple

from vidtube.app.models import Comment, User
from vidtube.infrastructure.repositories import CommentRepository, VideoRepository
from vidtube.services.base_service import BaseService
from vidtube.services.exceptions import ResourceNotFoundError


class CommentService(BaseService):
    """Comments on videos: paginated listing and owner-only edits"""

    def __init__(self, comment_repo: CommentRepository, video_repo: VideoRepository, config=None):
        super().__init__(config=config)
        self.comment_repo = comment_repo
        self.video_repo = video_repo

    def get_service_name(self) -> str:
        return "comment"

    async def _require_video(self, video_id: str, viewer: Optional[User]) -> str:
        video_id = self.validate_id(video_id, "videoId")
        if await self.video_repo.get_visible(video_id, viewer.id if viewer else None) is None:
            raise ResourceNotFoundError("Video", video_id, message="Video not found")
        return video_id

    async def _get_owned(self, comment_id: str, user: User) -> Comment:
        comment_id = self.validate_id(comment_id, "commentId")
        comment = await self.comment_repo.get_by_id(comment_id)
        if comment is None:
            raise ResourceNotFoundError("Comment", comment_id, message="Comment not found")
        self.ensure_owner(comment.owner_id, user.id, "Comment")
        return comment

    async def get_video_comments(
        self, video_id: str, viewer: Optional[User] = None, page=None, limit=None
    ) -> Tuple[List[Tuple[Comment, int]], int]:
        """
        Comments of a video, newest first

        Returns:
            Tuple of ([(comment, like_count)], total)
        """
        video_id = await self._require_video(video_id, viewer)
        skip, limit = self.calculate_pagination(page, limit)
        return await self.comment_repo.get_by_video(video_id, skip=skip, limit=limit)

    async def add_comment(self, video_id: str, user: User, content: str) -> Comment:
        self.validate_required(content, "content")
        video_id = await self._require_video(video_id, user)
        comment = await self.comment_repo.create(
            video_id=video_id, owner_id=user.id, content=content.strip()
        )
        self.log_info(f"💬 Comment {comment.id} added to video {video_id}")
        return comment

    async def update_comment(self, comment_id: str, user: User, content: str) -> Comment:
        self.validate_required(content, "content")
        comment = await self._get_owned(comment_id, user)
        updated = await self.comment_repo.update(comment.id, content=content.strip())
        if updated is None:
            raise ResourceNotFoundError("Comment", comment.id, message="Comment not found")
        return updated

    async def delete_comment(self, comment_id: str, user: User) -> None:
        comment = await self._get_owned(comment_id, user)
        await self.comment_repo.delete(comment.id)
