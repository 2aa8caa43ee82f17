# src/vidtube/app/models/like.py
"""
Like Model
A like points at exactly one of video, comment or tweet
"""

from datetime import datetime

from sqlalchemy import (
    Column,
    String,
    DateTime,
    ForeignKey,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import Base, id_column


class Like(Base):
    """
    Like relation

    Uniqueness per (liked_by, target) is enforced by the table so that
    concurrent toggles cannot produce duplicates.
    """

    __tablename__ = "likes"
    __table_args__ = (
        CheckConstraint(
            "(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN tweet_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="ck_likes_single_target",
        ),
        UniqueConstraint("liked_by_id", "video_id", name="uq_likes_video"),
        UniqueConstraint("liked_by_id", "comment_id", name="uq_likes_comment"),
        UniqueConstraint("liked_by_id", "tweet_id", name="uq_likes_tweet"),
    )

    id = id_column()
    liked_by_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who liked",
    )
    video_id = Column(
        String(36), ForeignKey("videos.id", ondelete="CASCADE"), index=True, comment="Liked video"
    )
    comment_id = Column(
        String(36), ForeignKey("comments.id", ondelete="CASCADE"), index=True, comment="Liked comment"
    )
    tweet_id = Column(
        String(36), ForeignKey("tweets.id", ondelete="CASCADE"), index=True, comment="Liked tweet"
    )
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, comment="Like time")

    liked_by = relationship("User")
    video = relationship("Video")

    def __repr__(self):
        target = self.video_id or self.comment_id or self.tweet_id
        return f"<Like(liked_by={self.liked_by_id}, target={target})>"
