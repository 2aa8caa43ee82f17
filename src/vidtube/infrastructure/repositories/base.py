# src/vidtube/infrastructure/repositories/base.py
"""
Base Repository Pattern
Provides generic CRUD operations for all entities
"""

from typing import Generic, TypeVar, Type, List, Optional, Any, cast
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func
from sqlalchemy.orm import InstrumentedAttribute
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType]):
    """
    Repository with generic CRUD operations

    Every write commits immediately; there is no unit of work spanning
    several repositories.

    Usage:
        class VideoRepository(BaseRepository[Video]):
            def __init__(self, session: AsyncSession):
                super().__init__(session, Video)
    """

    def __init__(self, session: AsyncSession, model: Type[ModelType]):
        """
        Initialize repository

        Args:
            session: Database session
            model: SQLAlchemy model class
        """
        self.session = session
        self.model = model

    def _id_col(self) -> InstrumentedAttribute:
        return cast(InstrumentedAttribute, getattr(self.model, "id"))

    def _apply_filters(self, query, filters: dict):
        for key, value in filters.items():
            if not hasattr(self.model, key):
                raise AttributeError(f"{self.model.__name__} has no column {key}")
            column = getattr(self.model, key)
            query = query.where(column.is_(None) if value is None else column == value)
        return query

    # ========================================================================
    # CREATE Operations
    # ========================================================================

    async def create(self, **kwargs) -> ModelType:
        """
        Create new entity

        Args:
            **kwargs: Model attributes

        Returns:
            Created model instance
        """
        try:
            instance: ModelType = cast(Any, self.model)(**kwargs)
            self.session.add(instance)
            await self.session.commit()
            await self.session.refresh(instance)
            logger.info(f"✅ Created {self.model.__name__}: {getattr(instance, 'id', 'N/A')}")
            return instance
        except Exception as e:
            await self.session.rollback()
            logger.error(f"❌ Failed to create {self.model.__name__}: {e}")
            raise

    # ========================================================================
    # READ Operations
    # ========================================================================

    async def get_by_id(self, id: str) -> Optional[ModelType]:
        """
        Get entity by ID

        Args:
            id: Entity ID

        Returns:
            Model instance or None
        """
        try:
            result = await self.session.get(self.model, id)
            return cast(Optional[ModelType], result)
        except Exception as e:
            logger.error(f"❌ Failed to get {self.model.__name__} by ID: {e}")
            raise

    async def count(self, **filters) -> int:
        """
        Count entities matching filters

        Args:
            **filters: Filter conditions

        Returns:
            Count of matching records
        """
        try:
            query = self._apply_filters(select(func.count()).select_from(self.model), filters)
            result = await self.session.execute(query)
            return int(result.scalar_one_or_none() or 0)
        except Exception as e:
            logger.error(f"❌ Failed to count {self.model.__name__}: {e}")
            raise

    async def exists(self, id: str) -> bool:
        """Check if entity exists"""
        try:
            stmt = select(func.count()).select_from(self.model).where(self._id_col() == id)
            result = await self.session.execute(stmt)
            return int(result.scalar_one_or_none() or 0) > 0
        except Exception as e:
            logger.error(f"❌ Failed to check existence: {e}")
            raise

    async def find_by(self, skip: int = 0, limit: Optional[int] = None, **filters) -> List[ModelType]:
        """
        Find entities by filters

        Args:
            skip: Pagination offset
            limit: Maximum number of records (None for all)
            **filters: Field-value pairs to filter by

        Returns:
            List of matching model instances
        """
        try:
            query = self._apply_filters(select(self.model), filters)
            if hasattr(self.model, "created_at"):
                query = query.order_by(getattr(self.model, "created_at").desc())
            query = query.offset(skip)
            if limit is not None:
                query = query.limit(limit)

            result = await self.session.execute(query)
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"❌ Failed to find {self.model.__name__}: {e}")
            raise

    async def find_one_by(self, **filters) -> Optional[ModelType]:
        """
        Find single entity by filters

        Args:
            **filters: Field-value pairs to filter by

        Returns:
            First matching model instance or None
        """
        try:
            query = self._apply_filters(select(self.model), filters).limit(1)
            result = await self.session.execute(query)
            return result.scalars().first()
        except Exception as e:
            logger.error(f"❌ Failed to find one {self.model.__name__}: {e}")
            raise

    # ========================================================================
    # UPDATE Operations
    # ========================================================================

    async def update(self, id: str, **kwargs) -> Optional[ModelType]:
        """
        Update entity by ID

        Args:
            id: Entity ID
            **kwargs: Fields to update

        Returns:
            Updated model instance or None
        """
        try:
            instance = await self.get_by_id(id)
            if instance is None:
                return None

            for key, value in kwargs.items():
                setattr(instance, key, value)

            await self.session.commit()
            await self.session.refresh(instance)
            logger.info(f"✅ Updated {self.model.__name__}: {id}")
            return instance
        except Exception as e:
            await self.session.rollback()
            logger.error(f"❌ Failed to update {self.model.__name__}: {e}")
            raise

    async def update_where(self, filters: dict, **values) -> int:
        """
        Conditional bulk update

        Returns:
            Number of rows changed
        """
        try:
            stmt = (
                self._apply_filters(update(self.model), filters)
                .values(**values)
                .execution_options(synchronize_session="fetch")
            )
            result = await self.session.execute(stmt)
            await self.session.commit()
            return int(result.rowcount or 0)
        except Exception as e:
            await self.session.rollback()
            logger.error(f"❌ Failed to update {self.model.__name__}: {e}")
            raise

    # ========================================================================
    # DELETE Operations
    # ========================================================================

    async def delete(self, id: str) -> bool:
        """
        Delete entity by ID

        Args:
            id: Entity ID

        Returns:
            True if deleted, False if not found
        """
        try:
            result = await self.session.execute(
                delete(self.model).where(self._id_col() == id)
            )
            await self.session.commit()

            deleted = (result.rowcount or 0) > 0
            if deleted:
                logger.info(f"✅ Deleted {self.model.__name__}: {id}")
            else:
                logger.warning(f"⚠️ {self.model.__name__} not found for deletion: {id}")

            return deleted
        except Exception as e:
            await self.session.rollback()
            logger.error(f"❌ Failed to delete {self.model.__name__}: {e}")
            raise


# ============================================================================
# Convenience Type Aliases
# ============================================================================

Repository = BaseRepository
