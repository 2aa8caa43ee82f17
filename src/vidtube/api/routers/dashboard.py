"""
Dashboard API Router
Statistics and uploads of the signed-in user's channel
"""

from fastapi import APIRouter, Depends

from vidtube.api.schemas import respond, video_to_response
from vidtube.app.dependencies import get_current_user, get_dashboard_service
from vidtube.app.models import User
from vidtube.services import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats")
async def get_channel_stats(
    user: User = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    stats = await service.get_channel_stats(user)
    return respond(stats, "Channel stats fetched successfully")


@router.get("/videos")
async def get_channel_videos(
    user: User = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    rows = await service.get_channel_videos(user)
    return respond(
        [video_to_response(video, likesCount=likes) for video, likes in rows],
        "Channel videos fetched successfully",
    )
