"""
Tweet API Router
"""

from fastapi import APIRouter, Depends, Path, Query

from vidtube.api.forms import form_or_json
from vidtube.api.schemas import ContentRequest, respond, tweet_to_response
from vidtube.app.dependencies import get_current_user, get_tweet_service
from vidtube.app.models import User
from vidtube.services import TweetService

router = APIRouter(prefix="/tweets", tags=["Tweets"])


@router.post("", status_code=201)
async def create_tweet(
    user: User = Depends(get_current_user),
    request: ContentRequest = Depends(form_or_json(ContentRequest)),
    service: TweetService = Depends(get_tweet_service),
):
    tweet = await service.create_tweet(user, request.content)
    return respond(tweet_to_response(tweet), "Tweet created successfully", 201)


@router.get("/user/{user_id}")
async def get_user_tweets(
    user_id: str = Path(..., description="Author (user) ID"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: TweetService = Depends(get_tweet_service),
):
    rows = await service.get_user_tweets(user_id, page=page, limit=limit)
    return respond(
        [tweet_to_response(t, likes) for t, likes in rows], "Tweets fetched successfully"
    )


@router.patch("/{tweet_id}")
async def update_tweet(
    tweet_id: str = Path(..., description="Tweet ID"),
    user: User = Depends(get_current_user),
    request: ContentRequest = Depends(form_or_json(ContentRequest)),
    service: TweetService = Depends(get_tweet_service),
):
    tweet = await service.update_tweet(tweet_id, user, request.content)
    return respond(tweet_to_response(tweet), "Tweet updated successfully")


@router.delete("/{tweet_id}")
async def delete_tweet(
    tweet_id: str = Path(..., description="Tweet ID"),
    user: User = Depends(get_current_user),
    service: TweetService = Depends(get_tweet_service),
):
    await service.delete_tweet(tweet_id, user)
    return respond({}, "Tweet deleted successfully")
