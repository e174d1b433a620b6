"""
Local entity store: engine, session management and the store itself.
"""

from .connection import check_connection, close_engine, create_engine, is_memory_url
from .session import SessionManager
from .store import EntityStore

__all__ = [
    # Connection utilities
    "create_engine",
    "check_connection",
    "close_engine",
    "is_memory_url",
    # Session management
    "SessionManager",
    # Store
    "EntityStore",
]
