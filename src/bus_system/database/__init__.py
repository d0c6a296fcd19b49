"""Database package for the bus system server.

This package provides the lazily created engine and session helpers.
"""

from .connection import (
    SessionFactory,
    borrow_db_session,
    create_all_tables,
    dispose_db,
    get_db_session,
    get_engine,
    is_healthy,
    is_initialized,
)

__all__ = [
    "SessionFactory",
    "borrow_db_session",
    "create_all_tables",
    "dispose_db",
    "get_db_session",
    "get_engine",
    "is_healthy",
    "is_initialized",
]
