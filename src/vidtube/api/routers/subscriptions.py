"""
Subscription API Router
"""

from fastapi import APIRouter, Depends, Path, Query

from vidtube.api.schemas import owner_summary, respond
from vidtube.app.dependencies import get_current_user, get_subscription_service
from vidtube.app.models import User
from vidtube.services import SubscriptionService

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


@router.post("/c/{channel_id}")
async def toggle_subscription(
    channel_id: str = Path(..., description="Channel (user) ID"),
    user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    result = await service.toggle_subscription(channel_id, user)
    message = "Subscribed successfully" if result.created else "Unsubscribed successfully"
    return respond({"subscribed": result.created, "action": result.action.value}, message)


@router.get("/c/{channel_id}")
async def get_channel_subscribers(
    channel_id: str = Path(..., description="Channel (user) ID"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    subscribers = await service.get_channel_subscribers(channel_id, page=page, limit=limit)
    return respond(
        [owner_summary(s) for s in subscribers], "Subscribers fetched successfully"
    )


@router.get("/u/{subscriber_id}")
async def get_subscribed_channels(
    subscriber_id: str = Path(..., description="Subscriber (user) ID"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    channels = await service.get_subscribed_channels(subscriber_id, page=page, limit=limit)
    return respond(
        [owner_summary(c) for c in channels], "Subscribed channels fetched successfully"
    )
