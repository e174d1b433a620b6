"""
Session management utilities for the local entity store.

This module provides the async session factory and the session and
transaction context managers used by the store.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import MetaData
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ..exceptions import StoreException
from .connection import check_connection, close_engine

logger = logging.getLogger(__name__)


class SessionManager:
    """Manages store sessions and provides transaction utilities."""

    def __init__(
        self, engine: AsyncEngine, session_config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize session manager with the store engine.

        Args:
            engine: SQLAlchemy async engine
            session_config: Optional session configuration overrides
        """
        self.engine = engine
        self._is_initialized = False

        config = {"expire_on_commit": False, "autoflush": True}
        if session_config:
            config.update(session_config)

        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            autoflush=config["autoflush"],
            expire_on_commit=config["expire_on_commit"],
        )

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for store sessions with automatic cleanup.

        Example:
            async with session_manager.get_session() as session:
                result = await session.execute(select(Pet))
        """
        session = self.session_factory()
        try:
            yield session
        except Exception as e:
            await session.rollback()
            logger.error(f"Session error, rolling back: {e}")
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def get_transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for store transactions with automatic commit/rollback.

        Example:
            async with session_manager.get_transaction() as session:
                await session.merge(pet)
                # Committed when the block exits without error
        """
        async with self.get_session() as session:
            async with session.begin():
                yield session

    async def initialize_database(self, metadata: MetaData) -> None:
        """
        Create the store tables.

        Raises:
            StoreException: If the schema cannot be created
        """
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
        except SQLAlchemyError as e:
            logger.error(f"Entity store initialization failed: {e}")
            raise StoreException(
                "Failed to initialize entity store",
                operation="initialize_database",
                original_error=e,
            )
        self._is_initialized = True
        logger.info("Entity store tables created")

    async def close_all_sessions(self) -> None:
        """Close all active sessions and dispose of the engine."""
        await close_engine(self.engine)
        self._is_initialized = False

    async def health_check(self) -> bool:
        return self._is_initialized and await check_connection(self.engine)
