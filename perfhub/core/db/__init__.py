"""
Read-only access to the performance-management tables.
"""

from .postgres import (
    Base,
    check_database_connection,
    close_engine,
    get_session,
    initialize_database,
    is_database_initialized,
)
from .repository import PerformanceRepository

__all__ = [
    "Base",
    "PerformanceRepository",
    "check_database_connection",
    "close_engine",
    "get_session",
    "initialize_database",
    "is_database_initialized",
]
