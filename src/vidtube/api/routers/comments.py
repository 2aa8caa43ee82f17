"""
Comment API Router
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from vidtube.api.forms import form_or_json
from vidtube.api.schemas import ContentRequest, comment_to_response, paginated, respond
from vidtube.app.dependencies import get_comment_service, get_current_user, get_optional_user
from vidtube.app.models import User
from vidtube.services import CommentService

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.get("/{video_id}")
async def get_video_comments(
    video_id: str = Path(..., description="Video ID"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    viewer: Optional[User] = Depends(get_optional_user),
    service: CommentService = Depends(get_comment_service),
):
    rows, total = await service.get_video_comments(video_id, viewer, page=page, limit=limit)
    return respond(
        paginated([comment_to_response(c, likes) for c, likes in rows], total, page, limit),
        "Comments fetched successfully",
    )


@router.post("/{video_id}", status_code=201)
async def add_comment(
    video_id: str = Path(..., description="Video ID"),
    user: User = Depends(get_current_user),
    request: ContentRequest = Depends(form_or_json(ContentRequest)),
    service: CommentService = Depends(get_comment_service),
):
    comment = await service.add_comment(video_id, user, request.content)
    return respond(comment_to_response(comment), "Comment added successfully", 201)


@router.patch("/c/{comment_id}")
async def update_comment(
    comment_id: str = Path(..., description="Comment ID"),
    user: User = Depends(get_current_user),
    request: ContentRequest = Depends(form_or_json(ContentRequest)),
    service: CommentService = Depends(get_comment_service),
):
    comment = await service.update_comment(comment_id, user, request.content)
    return respond(comment_to_response(comment), "Comment updated successfully")


@router.delete("/c/{comment_id}")
async def delete_comment(
    comment_id: str = Path(..., description="Comment ID"),
    user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
):
    await service.delete_comment(comment_id, user)
    return respond({}, "Comment deleted successfully")
