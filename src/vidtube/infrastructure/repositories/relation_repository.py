# src/vidtube/infrastructure/repositories/relation_repository.py
"""
Relation Repository
Rows keyed by an (actor, target) pair, such as likes and subscriptions
"""

from typing import Optional, Type
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from .base import BaseRepository, ModelType

logger = logging.getLogger(__name__)


class RelationExistsError(Exception):
    """Insert rejected by the (actor, target) uniqueness constraint"""


class RelationRepository(BaseRepository[ModelType]):
    """
    Pair-keyed relation access

    Subclasses name the two columns forming the key. The table must carry a
    unique constraint over them.
    """

    actor_field: str
    target_field: str
    kind: str

    def __init__(
        self,
        session: AsyncSession,
        model: Type[ModelType],
        actor_field: str,
        target_field: str,
        kind: Optional[str] = None,
    ):
        super().__init__(session, model)
        self.actor_field = actor_field
        self.target_field = target_field
        self.kind = kind or model.__name__.lower()

    async def find_relation(self, actor_id: str, target_id: str) -> Optional[ModelType]:
        """Return the row for (actor, target) if present"""
        try:
            result = await self.session.execute(
                select(self.model)
                .where(
                    getattr(self.model, self.actor_field) == actor_id,
                    getattr(self.model, self.target_field) == target_id,
                )
                .limit(1)
            )
            return result.scalars().first()
        except Exception as e:
            logger.error(f"❌ Failed to find {self.kind} relation: {e}")
            raise

    async def create_relation(self, actor_id: str, target_id: str) -> ModelType:
        """
        Insert the (actor, target) row

        Raises:
            RelationExistsError: A row for the pair was inserted concurrently
        """
        try:
            return await self.create(
                **{self.actor_field: actor_id, self.target_field: target_id}
            )
        except IntegrityError as e:
            # create() already rolled back; foreign key failures are not duplicates
            if await self.find_relation(actor_id, target_id) is None:
                raise
            logger.warning(f"⚠️ Duplicate {self.kind} relation ({actor_id}, {target_id})")
            raise RelationExistsError(self.kind) from e

    async def count_for_target(self, target_id: str) -> int:
        return await self.count(**{self.target_field: target_id})


__all__ = ["RelationRepository", "RelationExistsError"]
