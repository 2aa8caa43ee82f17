# src/vidtube/app/models/comment.py
"""
Comment Model
"""

from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, id_column


class Comment(TimestampMixin, Base):
    """Comment left by a user on a video"""

    __tablename__ = "comments"

    id = id_column()
    video_id = Column(
        String(36),
        ForeignKey("videos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Commented video",
    )
    owner_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Author",
    )
    content = Column(Text, nullable=False, comment="Comment text")

    video = relationship("Video", back_populates="comments")
    owner = relationship("User")

    def __repr__(self):
        return f"<Comment(id={self.id}, video_id={self.video_id})>"
