"""
Like API Router
"""

from fastapi import APIRouter, Depends, Path

from vidtube.api.schemas import respond, video_to_response
from vidtube.app.dependencies import get_current_user, get_like_service
from vidtube.app.models import User
from vidtube.services import LikeService, ToggleResult

router = APIRouter(prefix="/likes", tags=["Likes"])


def _toggle_response(result: ToggleResult, resource: str):
    message = f"{resource} liked" if result.created else f"{resource} unliked"
    return respond({"isLiked": result.created, "action": result.action.value}, message)


@router.post("/toggle/v/{video_id}")
async def toggle_video_like(
    video_id: str = Path(..., description="Video ID"),
    user: User = Depends(get_current_user),
    service: LikeService = Depends(get_like_service),
):
    return _toggle_response(await service.toggle_video_like(video_id, user), "Video")


@router.post("/toggle/c/{comment_id}")
async def toggle_comment_like(
    comment_id: str = Path(..., description="Comment ID"),
    user: User = Depends(get_current_user),
    service: LikeService = Depends(get_like_service),
):
    return _toggle_response(await service.toggle_comment_like(comment_id, user), "Comment")


@router.post("/toggle/t/{tweet_id}")
async def toggle_tweet_like(
    tweet_id: str = Path(..., description="Tweet ID"),
    user: User = Depends(get_current_user),
    service: LikeService = Depends(get_like_service),
):
    return _toggle_response(await service.toggle_tweet_like(tweet_id, user), "Tweet")


@router.get("/videos")
async def get_liked_videos(
    user: User = Depends(get_current_user),
    service: LikeService = Depends(get_like_service),
):
    videos = await service.get_liked_videos(user)
    return respond([video_to_response(v) for v in videos], "Liked videos fetched successfully")
