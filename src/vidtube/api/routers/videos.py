"""
Video API Router
REST endpoints for video operations
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile

from vidtube.api.schemas import paginated, respond, video_to_response
from vidtube.api.uploads import staged_files
from vidtube.app.config import Config
from vidtube.app.dependencies import (
    get_app_config,
    get_current_user,
    get_optional_user,
    get_video_service,
)
from vidtube.app.models import User
from vidtube.services import VideoService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/videos", tags=["Videos"])


@router.get("")
async def get_all_videos(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Page size"),
    query: Optional[str] = Query(None, description="Search in title and description"),
    sortBy: Optional[str] = Query(None, description="created_at, view_count, duration_seconds or title"),
    sortType: Optional[str] = Query(None, description="asc or desc"),
    userId: Optional[str] = Query(None, description="Restrict to one channel"),
    viewer: Optional[User] = Depends(get_optional_user),
    service: VideoService = Depends(get_video_service),
):
    """
    Search videos

    - **query**: case-insensitive text filter
    - **userId**: channel filter; a channel listing itself also sees unpublished videos
    """
    videos, total = await service.list_videos(
        viewer=viewer,
        page=page,
        limit=limit,
        query=query,
        sort_by=sortBy,
        sort_type=sortType,
        user_id=userId,
    )
    return respond(
        paginated([video_to_response(v) for v in videos], total, page, limit),
        "Videos fetched successfully",
    )


@router.post("", status_code=201)
async def publish_a_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    videoFile: Optional[UploadFile] = File(None),
    thumbnail: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    service: VideoService = Depends(get_video_service),
    config: Config = Depends(get_app_config),
):
    """Upload a video file and thumbnail and create the video"""
    async with staged_files(config.media.upload_dir, videoFile, thumbnail) as (video_path, thumb_path):
        video = await service.publish_video(user, title, description, video_path, thumb_path)
    return respond(video_to_response(video), "Video published successfully", 201)


@router.get("/{video_id}")
async def get_video_by_id(
    video_id: str = Path(..., description="Video ID"),
    viewer: Optional[User] = Depends(get_optional_user),
    service: VideoService = Depends(get_video_service),
):
    result = await service.get_video(video_id, viewer)
    return respond(
        video_to_response(
            result["video"], likesCount=result["likes_count"], isLiked=result["is_liked"]
        ),
        "Video fetched successfully",
    )


@router.patch("/{video_id}")
async def update_video(
    video_id: str = Path(..., description="Video ID"),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    service: VideoService = Depends(get_video_service),
    config: Config = Depends(get_app_config),
):
    async with staged_files(config.media.upload_dir, thumbnail) as (thumb_path,):
        video = await service.update_video(video_id, user, title, description, thumb_path)
    return respond(video_to_response(video), "Video updated successfully")


@router.delete("/{video_id}")
async def delete_video(
    video_id: str = Path(..., description="Video ID"),
    user: User = Depends(get_current_user),
    service: VideoService = Depends(get_video_service),
):
    await service.delete_video(video_id, user)
    return respond({}, "Video deleted successfully")


@router.patch("/toggle/publish/{video_id}")
async def toggle_publish_status(
    video_id: str = Path(..., description="Video ID"),
    user: User = Depends(get_current_user),
    service: VideoService = Depends(get_video_service),
):
    video = await service.toggle_publish_status(video_id, user)
    return respond(
        {"id": video.id, "isPublished": video.is_published},
        "Publish status toggled successfully",
    )
