# src/vidtube/infrastructure/repositories/__init__.py
"""
Repository Layer
Data access patterns for all entities
"""

from .base import BaseRepository
from .user_repository import UserRepository
from .video_repository import VideoRepository
from .comment_repository import CommentRepository
from .relation_repository import RelationRepository, RelationExistsError
from .like_repository import LikeRepository
from .subscription_repository import SubscriptionRepository
from .playlist_repository import PlaylistRepository
from .tweet_repository import TweetRepository
from .channel_repository import ChannelRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "VideoRepository",
    "CommentRepository",
    "RelationRepository",
    "RelationExistsError",
    "LikeRepository",
    "SubscriptionRepository",
    "PlaylistRepository",
    "TweetRepository",
    "ChannelRepository",
]
