# src/vidtube/app/models/tweet.py
"""
Tweet Model
Short text posts on a user's channel
"""

from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, id_column


class Tweet(TimestampMixin, Base):
    __tablename__ = "tweets"

    id = id_column()
    owner_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Author",
    )
    content = Column(Text, nullable=False, comment="Tweet text")

    owner = relationship("User")

    def __repr__(self):
        return f"<Tweet(id={self.id}, owner_id={self.owner_id})>"
