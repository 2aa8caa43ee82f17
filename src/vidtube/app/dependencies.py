"""
Service Dependency Injection
FastAPI dependency providers for configuration, services and the auth gate
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.app.config import Config
from vidtube.app.database import get_db
from vidtube.app.models import User
from vidtube.infrastructure.clients.media_client import MediaStore
from vidtube.infrastructure.repositories import (
    ChannelRepository,
    CommentRepository,
    LikeRepository,
    PlaylistRepository,
    SubscriptionRepository,
    TweetRepository,
    UserRepository,
    VideoRepository,
)
from vidtube.services import (
    AuthenticationError,
    CommentService,
    DashboardService,
    LikeService,
    PlaylistService,
    SubscriptionService,
    TokenService,
    TweetService,
    UserService,
    VideoService,
)

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================================
# Application State
# ============================================================================


def get_app_config(request: Request) -> Config:
    return request.app.state.config


def get_media_client(request: Request) -> MediaStore:
    return request.app.state.media_client


# ============================================================================
# Auth Gate
# ============================================================================


def get_token_service(
    db: AsyncSession = Depends(get_db), config: Config = Depends(get_app_config)
) -> TokenService:
    return TokenService(UserRepository(db), config.auth)


def extract_access_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    """Cookie wins over the Authorization header"""
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return None


async def _resolve_user(token: str, db: AsyncSession, tokens: TokenService) -> User:
    user_id = tokens.verify_access(token)
    user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        logger.warning(f"⚠️ Access token for unknown user {user_id}")
        raise AuthenticationError("Invalid access token")
    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> User:
    """
    Require an authenticated user

    Usage in FastAPI:
        @router.get("/current-user")
        async def current_user(user: User = Depends(get_current_user)):
            ...

    Raises:
        AuthenticationError: No token, bad token, or unknown user
    """
    token = extract_access_token(request, credentials)
    if not token:
        raise AuthenticationError("Unauthorized request")
    return await _resolve_user(token, db, tokens)


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> Optional[User]:
    """Like get_current_user, but anonymous requests yield None"""
    token = extract_access_token(request, credentials)
    if not token:
        return None
    return await _resolve_user(token, db, tokens)


# ============================================================================
# Service Factories
# ============================================================================


def get_user_service(
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    media: MediaStore = Depends(get_media_client),
    config: Config = Depends(get_app_config),
) -> UserService:
    return UserService(
        user_repo=UserRepository(db),
        channel_repo=ChannelRepository(db),
        token_service=tokens,
        media=media,
        config=config,
    )


def get_video_service(
    db: AsyncSession = Depends(get_db),
    media: MediaStore = Depends(get_media_client),
    config: Config = Depends(get_app_config),
) -> VideoService:
    return VideoService(
        video_repo=VideoRepository(db),
        user_repo=UserRepository(db),
        like_repo=LikeRepository(db, "video"),
        media=media,
        config=config,
    )


def get_comment_service(
    db: AsyncSession = Depends(get_db), config: Config = Depends(get_app_config)
) -> CommentService:
    return CommentService(CommentRepository(db), VideoRepository(db), config=config)


def get_like_service(
    db: AsyncSession = Depends(get_db), config: Config = Depends(get_app_config)
) -> LikeService:
    return LikeService(
        video_likes=LikeRepository(db, "video"),
        comment_likes=LikeRepository(db, "comment"),
        tweet_likes=LikeRepository(db, "tweet"),
        video_repo=VideoRepository(db),
        comment_repo=CommentRepository(db),
        tweet_repo=TweetRepository(db),
        config=config,
    )


def get_subscription_service(
    db: AsyncSession = Depends(get_db), config: Config = Depends(get_app_config)
) -> SubscriptionService:
    return SubscriptionService(SubscriptionRepository(db), UserRepository(db), config=config)


def get_playlist_service(
    db: AsyncSession = Depends(get_db), config: Config = Depends(get_app_config)
) -> PlaylistService:
    return PlaylistService(
        PlaylistRepository(db), VideoRepository(db), UserRepository(db), config=config
    )


def get_tweet_service(
    db: AsyncSession = Depends(get_db), config: Config = Depends(get_app_config)
) -> TweetService:
    return TweetService(TweetRepository(db), UserRepository(db), config=config)


def get_dashboard_service(
    db: AsyncSession = Depends(get_db), config: Config = Depends(get_app_config)
) -> DashboardService:
    return DashboardService(ChannelRepository(db), VideoRepository(db), config=config)
