# src/vidtube/app/models/subscription.py
"""
Subscription Model
"""

from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base, id_column


class Subscription(Base):
    """Subscriber (a user) follows a channel (also a user)"""

    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_pair"),
    )

    id = id_column()
    subscriber_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Subscribing user",
    )
    channel_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Channel owner",
    )
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, comment="Subscribed at")

    subscriber = relationship("User", foreign_keys=[subscriber_id])
    channel = relationship("User", foreign_keys=[channel_id])

    def __repr__(self):
        return f"<Subscription(subscriber={self.subscriber_id}, channel={self.channel_id})>"
