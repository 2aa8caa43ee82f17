# src/vidtube/app/models/playlist.py
"""
Playlist Model
Named, ordered collection of videos owned by a user
"""

from datetime import datetime

from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, id_column


class PlaylistVideo(Base):
    """Playlist membership; the composite key forbids duplicates"""

    __tablename__ = "playlist_videos"

    playlist_id = Column(
        String(36),
        ForeignKey("playlists.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Playlist",
    )
    video_id = Column(
        String(36),
        ForeignKey("videos.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Member video",
    )
    added_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True, comment="Added at")

    playlist = relationship("Playlist", back_populates="entries")
    video = relationship("Video")


class Playlist(TimestampMixin, Base):
    __tablename__ = "playlists"

    id = id_column()
    name = Column(String(255), nullable=False, comment="Playlist name")
    description = Column(Text, nullable=False, default="", comment="Playlist description")
    owner_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owner",
    )

    owner = relationship("User")
    entries = relationship(
        "PlaylistVideo",
        back_populates="playlist",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PlaylistVideo.added_at",
    )

    def __repr__(self):
        return f"<Playlist(id={self.id}, name={self.name})>"
