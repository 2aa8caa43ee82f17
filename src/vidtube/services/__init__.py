"""
Service Layer
Business logic between the API routers and the repositories
"""

from .exceptions import (
    ServiceError,
    ValidationError,
    AuthenticationError,
    PermissionDeniedError,
    ResourceNotFoundError,
    ResourceConflictError,
    ResourceAlreadyExistsError,
    ExternalServiceError,
    MediaUploadError,
    InternalError,
)
from .base_service import BaseService
from .token_service import TokenPair, TokenService
from .toggle_service import ToggleAction, ToggleResult, ToggleRelationEngine
from .user_service import UserService, hash_password, verify_password
from .video_service import VideoService
from .comment_service import CommentService
from .like_service import LikeService
from .subscription_service import SubscriptionService
from .playlist_service import PlaylistService
from .tweet_service import TweetService
from .dashboard_service import DashboardService

__all__ = [
    # Exceptions
    "ServiceError",
    "ValidationError",
    "AuthenticationError",
    "PermissionDeniedError",
    "ResourceNotFoundError",
    "ResourceConflictError",
    "ResourceAlreadyExistsError",
    "ExternalServiceError",
    "MediaUploadError",
    "InternalError",
    # Services
    "BaseService",
    "TokenPair",
    "TokenService",
    "ToggleAction",
    "ToggleResult",
    "ToggleRelationEngine",
    "UserService",
    "hash_password",
    "verify_password",
    "VideoService",
    "CommentService",
    "LikeService",
    "SubscriptionService",
    "PlaylistService",
    "TweetService",
    "DashboardService",
]
