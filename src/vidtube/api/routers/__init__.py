"""
API Routers
"""

from .healthcheck import router as healthcheck_router
from .users import router as users_router
from .videos import router as videos_router
from .comments import router as comments_router
from .likes import router as likes_router
from .subscriptions import router as subscriptions_router
from .playlists import router as playlists_router
from .tweets import router as tweets_router
from .dashboard import router as dashboard_router

ALL_ROUTERS = [
    healthcheck_router,
    users_router,
    videos_router,
    comments_router,
    likes_router,
    subscriptions_router,
    playlists_router,
    tweets_router,
    dashboard_router,
]

__all__ = [
    "ALL_ROUTERS",
    "healthcheck_router",
    "users_router",
    "videos_router",
    "comments_router",
    "likes_router",
    "subscriptions_router",
    "playlists_router",
    "tweets_router",
    "dashboard_router",
]
