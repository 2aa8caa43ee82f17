"""
Toggle-Relation Engine
Create-if-absent / delete-if-present over pair-keyed relations
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional

from vidtube.infrastructure.repositories import RelationExistsError, RelationRepository

logger = logging.getLogger(__name__)


class ToggleAction(str, enum.Enum):
    CREATED = "created"
    DELETED = "deleted"


@dataclass
class ToggleResult:
    action: ToggleAction
    relation: Optional[Any] = None

    @property
    def created(self) -> bool:
        return self.action is ToggleAction.CREATED


class ToggleRelationEngine:
    """
    Flip the existence of an (actor, target) relation

    Callers validate ids and target existence first. Duplicates are ruled out
    by the table's unique constraint: when a concurrent toggle inserts the
    same pair first, this call reports CREATED for the row that now exists.
    """

    def __init__(self, repository: RelationRepository):
        self.repository = repository

    async def toggle(self, actor_id: str, target_id: str) -> ToggleResult:
        existing = await self.repository.find_relation(actor_id, target_id)
        if existing is not None:
            await self.repository.delete(existing.id)
            logger.info(f"➖ {self.repository.kind} removed ({actor_id} -> {target_id})")
            return ToggleResult(ToggleAction.DELETED, existing)

        try:
            relation = await self.repository.create_relation(actor_id, target_id)
        except RelationExistsError:
            relation = await self.repository.find_relation(actor_id, target_id)
            return ToggleResult(ToggleAction.CREATED, relation)

        logger.info(f"➕ {self.repository.kind} added ({actor_id} -> {target_id})")
        return ToggleResult(ToggleAction.CREATED, relation)
