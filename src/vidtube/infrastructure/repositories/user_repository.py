# src/vidtube/infrastructure/repositories/user_repository.py
"""
User Repository
Credential store, refresh-token session state and watch history
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import select, delete, or_, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import logging

from .base import BaseRepository
from vidtube.app.models import User, Video, WatchHistoryEntry

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for User operations
    """

    def __init__(self, session: AsyncSession):
        """Initialize user repository"""
        super().__init__(session, User)

    # ========================================================================
    # Lookup
    # ========================================================================

    async def get_by_username(self, username: str) -> Optional[User]:
        return await self.find_one_by(username=username.strip().lower())

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self.find_one_by(email=email.strip().lower())

    async def get_by_username_or_email(
        self, username: Optional[str] = None, email: Optional[str] = None
    ) -> Optional[User]:
        """
        Find a user matching either identifier

        Args:
            username: Username (case-insensitive)
            email: Email (case-insensitive)

        Returns:
            First matching user or None
        """
        conditions = []
        if username:
            conditions.append(User.username == username.strip().lower())
        if email:
            conditions.append(User.email == email.strip().lower())
        if not conditions:
            return None

        try:
            result = await self.session.execute(select(User).where(or_(*conditions)).limit(1))
            return result.scalars().first()
        except Exception as e:
            logger.error(f"❌ Failed to look up user: {e}")
            raise

    # ========================================================================
    # Session State (refresh token)
    # ========================================================================

    async def set_refresh_token(self, user_id: str, token: Optional[str]) -> bool:
        """
        Overwrite the stored refresh token

        Returns:
            True if the user exists
        """
        return await self.update_where({"id": user_id}, refresh_token=token) > 0

    async def swap_refresh_token(self, user_id: str, expected: str, new_token: str) -> bool:
        """
        Compare-and-swap the stored refresh token

        The update only applies while the stored value still equals
        ``expected``, so two concurrent refreshes with the same token cannot
        both succeed.

        Returns:
            True if this call performed the rotation
        """
        changed = await self.update_where(
            {"id": user_id, "refresh_token": expected}, refresh_token=new_token
        )
        if changed != 1:
            logger.warning(f"⚠️ Refresh token rotation lost for user {user_id}")
        return changed == 1

    # ========================================================================
    # Watch History
    # ========================================================================

    async def record_watch(self, user_id: str, video_id: str) -> None:
        """
        Put a video at the front of the user's watch history

        A video already in the history is moved rather than duplicated.
        """
        try:
            await self.session.execute(
                delete(WatchHistoryEntry).where(
                    WatchHistoryEntry.user_id == user_id,
                    WatchHistoryEntry.video_id == video_id,
                )
            )
            self.session.add(
                WatchHistoryEntry(user_id=user_id, video_id=video_id, watched_at=datetime.utcnow())
            )
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error(f"❌ Failed to record watch history: {e}")
            raise

    async def get_watch_history(self, user_id: str) -> List[Video]:
        """
        Resolve the watch history into videos, most recent first

        Owners are eagerly loaded so callers can project them without lazy
        loads.
        """
        try:
            result = await self.session.execute(
                select(Video)
                .join(WatchHistoryEntry, WatchHistoryEntry.video_id == Video.id)
                .where(WatchHistoryEntry.user_id == user_id)
                .options(selectinload(Video.owner))
                .order_by(desc(WatchHistoryEntry.watched_at))
            )
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"❌ Failed to get watch history: {e}")
            raise


__all__ = ["UserRepository"]
