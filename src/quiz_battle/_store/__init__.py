# Area: Store
"""
Persistence layer for the battle engine.

This package contains:
- The MatchStore contract the engine depends on
- A SQLite implementation with one repository per table
- The in-process change feed used for push notifications
- The quiz content catalog
"""

from .interface import MatchStore
from .sqlite_store import SQLiteMatchStore
from .change_feed import ChangeFeed
from .catalog import ContentCatalog
from .database import init_database, get_connection

__all__ = [
    "MatchStore",
    "SQLiteMatchStore",
    "ChangeFeed",
    "ContentCatalog",
    "init_database",
    "get_connection",
]
