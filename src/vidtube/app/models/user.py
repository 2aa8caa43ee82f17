# src/vidtube/app/models/user.py
"""
User Model
Account identity, credentials, session state and watch history
"""

from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, id_column


class User(TimestampMixin, Base):
    """
    Platform user (and channel)

    A user's channel is the user itself: videos, tweets and playlists are
    owned by a user and subscriptions point at a user.
    """

    __tablename__ = "users"

    id = id_column()

    # Identity
    username = Column(
        String(64), nullable=False, unique=True, index=True, comment="Lower-cased handle"
    )
    email = Column(
        String(255), nullable=False, unique=True, index=True, comment="Lower-cased email"
    )
    fullname = Column(String(255), nullable=False, index=True, comment="Display name")

    # Credentials & session
    password_hash = Column(String(255), nullable=False, comment="Password hash")
    refresh_token = Column(Text, nullable=True, comment="Current refresh token")

    # Profile media
    avatar_url = Column(String(500), nullable=False, comment="Avatar URL")
    avatar_public_id = Column(String(255), comment="Avatar media asset id")
    cover_image_url = Column(String(500), comment="Cover image URL")
    cover_image_public_id = Column(String(255), comment="Cover image media asset id")

    # Relationships
    videos = relationship(
        "Video", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True
    )
    watch_history = relationship(
        "WatchHistoryEntry",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"

    def to_dict(self) -> dict:
        """Public representation (credentials excluded)"""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "fullname": self.fullname,
            "avatar": self.avatar_url,
            "coverImage": self.cover_image_url,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class WatchHistoryEntry(Base):
    """Ordered watch history: one row per (user, video), newest first"""

    __tablename__ = "watch_history"

    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Viewer",
    )
    video_id = Column(
        String(36),
        ForeignKey("videos.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Watched video",
    )
    watched_at = Column(
        DateTime, nullable=False, default=datetime.utcnow, index=True, comment="Last view"
    )

    user = relationship("User", back_populates="watch_history")
    video = relationship("Video")
