"""
ORM models
"""

from .base import Base, new_id
from .user import User, WatchHistoryEntry
from .video import Video
from .comment import Comment
from .like import Like
from .subscription import Subscription
from .playlist import Playlist, PlaylistVideo
from .tweet import Tweet

__all__ = [
    "Base",
    "new_id",
    "User",
    "WatchHistoryEntry",
    "Video",
    "Comment",
    "Like",
    "Subscription",
    "Playlist",
    "PlaylistVideo",
    "Tweet",
]
