# src/vidtube/app/database.py
"""
Database Configuration and Session Management
Uses SQLAlchemy with async support
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from vidtube.app.config import DatabaseConfig
from vidtube.app.models import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless this pragma is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """
    Owns the async engine and session factory

    One instance is created per application and handed to request handlers
    through ``app.state``; nothing else holds a connection.
    """

    def __init__(self, config: DatabaseConfig):
        self.url = config.url
        self.engine: AsyncEngine = create_async_engine(
            config.url, echo=config.echo, **self._engine_options(config)
        )

        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

    @staticmethod
    def _engine_options(config: DatabaseConfig) -> dict:
        if config.url.startswith("sqlite"):
            if ":memory:" in config.url:
                # In-memory databases only live as long as their single connection
                return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
            return {"connect_args": {"check_same_thread": False}}

        return {
            "pool_size": config.pool_size,
            "max_overflow": config.max_overflow,
            "pool_pre_ping": True,
        }

    async def create_tables(self) -> None:
        """
        Initialize database tables
        Creates all tables defined by models
        """
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("✅ Database tables created successfully")
        except Exception as e:
            logger.error(f"❌ Failed to create database tables: {e}")
            raise

    async def drop_tables(self) -> None:
        """Drop all tables (development/testing only)"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.warning("⚠️  All tables dropped")

    async def ping(self) -> bool:
        """Check that the database answers a trivial query"""
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(text("SELECT 1"))
                return result.scalar() == 1
        except Exception as e:
            logger.error(f"❌ Database ping failed: {e}")
            return False

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a session scoped to a unit of work

        Usage:
            async with db_manager.session() as session:
                repo = VideoRepository(session)
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        """Dispose of the engine and its pooled connections"""
        await self.engine.dispose()
        logger.info("🔌 Database connections closed")


def get_db_manager(request: Request) -> DatabaseManager:
    manager: Optional[DatabaseManager] = getattr(request.app.state, "db_manager", None)
    if manager is None:
        raise RuntimeError("Database manager is not initialized")
    return manager


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting database session

    Usage in FastAPI:
        @router.get("/videos")
        async def get_videos(db: AsyncSession = Depends(get_db)):
            ...

    Yields:
        Database session
    """
    async with get_db_manager(request).session() as session:
        yield session
