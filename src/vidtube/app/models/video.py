# src/vidtube/app/models/video.py
"""
Video Model
Represents an uploaded video with media references and engagement counters
"""

from typing import Optional

from sqlalchemy import (
    Column,
    String,
    Integer,
    BigInteger,
    Text,
    Boolean,
    ForeignKey,
    CheckConstraint,
)
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, id_column


class Video(TimestampMixin, Base):
    """
    Uploaded video

    Stores media URLs returned by the media host, descriptive metadata,
    publish state and view counter. The owner never changes after creation.
    """

    __tablename__ = "videos"
    __table_args__ = (CheckConstraint("view_count >= 0", name="ck_videos_view_count"),)

    # Primary Key
    id = id_column()

    # Foreign Keys
    owner_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Uploading user",
    )

    # Basic Info
    title = Column(String(500), nullable=False, index=True, comment="Video title")
    description = Column(Text, nullable=False, default="", comment="Video description")

    # Media
    video_url = Column(String(500), nullable=False, comment="Video file URL")
    video_public_id = Column(String(255), comment="Video media asset id")
    thumbnail_url = Column(String(500), nullable=False, comment="Thumbnail URL")
    thumbnail_public_id = Column(String(255), comment="Thumbnail media asset id")
    duration_seconds = Column(Integer, nullable=False, default=0, comment="Length in seconds")

    # Engagement
    view_count = Column(BigInteger, nullable=False, default=0, index=True, comment="Total views")
    is_published = Column(Boolean, nullable=False, default=True, index=True, comment="Publicly listed")

    # Relationships
    owner = relationship("User", back_populates="videos")
    comments = relationship(
        "Comment", back_populates="video", cascade="all, delete-orphan", passive_deletes=True
    )

    def is_visible_to(self, user_id: Optional[str]) -> bool:
        """Unpublished videos are only visible to their owner"""
        return bool(self.is_published) or (user_id is not None and user_id == self.owner_id)

    def __repr__(self):
        return f"<Video(id={self.id}, title={self.title[:30]}...)>"

    def to_dict(self) -> dict:
        """Convert model to dictionary"""
        return {
            "id": self.id,
            "owner": self.owner_id,
            "title": self.title,
            "description": self.description,
            "videoFile": self.video_url,
            "thumbnail": self.thumbnail_url,
            "duration": self.duration_seconds,
            "views": self.view_count,
            "isPublished": self.is_published,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
