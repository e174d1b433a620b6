"""
Engine utilities for the local entity store.

The store is an async SQLite database, in memory by default. An in-memory
database lives as long as its single connection, so the engine pins one
connection with ``StaticPool``.
"""

import logging
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from ..exceptions import StoreException
from ..utils.config import DEFAULT_STORE_URL, validate_store_url

logger = logging.getLogger(__name__)


def is_memory_url(store_url: str) -> bool:
    """Check whether the store URL points at an in-memory SQLite database."""
    return store_url.rstrip("/").endswith(":memory:") or store_url.endswith("://")


def create_engine(store_url: str = DEFAULT_STORE_URL, echo: bool = False) -> AsyncEngine:
    """
    Create the async SQLAlchemy engine backing the entity store.

    Args:
        store_url: ``sqlite+aiosqlite`` URL
        echo: Whether to echo SQL statements

    Returns:
        Configured async SQLAlchemy engine

    Raises:
        ConfigError: If the URL is not an async SQLite URL
        StoreException: If the engine cannot be created
    """
    store_url = validate_store_url(store_url)

    engine_kwargs: Dict[str, Any] = {
        "echo": echo,
        "connect_args": {"check_same_thread": False},
    }
    if is_memory_url(store_url):
        engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["poolclass"] = NullPool

    try:
        engine = create_async_engine(store_url, **engine_kwargs)
        logger.info(f"Created entity store engine for {store_url}")
        return engine
    except Exception as e:
        logger.error(f"Failed to create entity store engine: {e}")
        raise StoreException(
            "Failed to create entity store engine",
            operation="create_engine",
            original_error=e,
        )


async def check_connection(engine: AsyncEngine) -> bool:
    """
    Check that the store answers a trivial query.

    Returns:
        True if the store is usable, False otherwise
    """
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Entity store connection check failed: {e}")
        return False


async def close_engine(engine: AsyncEngine) -> None:
    """Dispose of the engine and its pinned connection."""
    await engine.dispose()
    logger.info("Entity store engine closed")
