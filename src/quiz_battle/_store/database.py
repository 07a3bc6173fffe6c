# Area: Store
"""
quiz_battle._store.database — Database Initialization
=====================================================

Connections and schema setup for the SQLite match store. Several
clients may hold the same file open, so connections wait on a locked
database instead of failing at once.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ..errors import StoreError

logger = logging.getLogger("quiz_battle.store.database")

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

# Seconds a connection waits for another writer's lock.
BUSY_TIMEOUT_SECONDS = 5.0


def get_connection(db_path: str = "quiz_battle.db") -> sqlite3.Connection:
    """Open a connection returning rows as ``sqlite3.Row``."""
    conn = sqlite3.connect(db_path, timeout=BUSY_TIMEOUT_SECONDS)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_database(db_path: str = "quiz_battle.db") -> None:
    """
    Create the tables if they do not exist yet.

    Raises:
        StoreError: If the schema cannot be applied
    """
    schema = SCHEMA_PATH.read_text(encoding="utf-8")
    try:
        conn = get_connection(db_path)
    except sqlite3.Error as e:
        raise StoreError(f"Cannot open database {db_path}: {e}") from e
    try:
        conn.executescript(schema)
        conn.commit()
    except sqlite3.Error as e:
        raise StoreError(f"Cannot initialize database {db_path}: {e}") from e
    finally:
        conn.close()
    logger.debug("Database ready at %s", db_path)


class BaseRepository:
    """
    Base class for database repositories.

    Provides common database operations and connection management.
    Every method accepts an optional open connection so several
    repositories can take part in one transaction.
    """

    def __init__(self, db_path: str = "quiz_battle.db"):
        """
        Initialize repository.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        """Get a database connection."""
        return get_connection(self.db_path)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection that commits on success and rolls back on error."""
        conn = self._get_conn()
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(str(e)) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _execute(
        self,
        query: str,
        params: tuple = (),
        fetch: bool = False,
        conn: Optional[sqlite3.Connection] = None,
    ):
        """
        Execute a query.

        Args:
            query: SQL query string
            params: Query parameters
            fetch: If True, fetch and return results
            conn: Connection of an enclosing transaction, if any

        Returns:
            List of row dicts if fetch=True, else the number of rows changed

        Raises:
            StoreError: If the driver rejects the statement
        """
        if conn is not None:
            cursor = conn.execute(query, params)
            if fetch:
                return [dict(row) for row in cursor.fetchall()]
            return cursor.rowcount

        own = self._get_conn()
        try:
            cursor = own.execute(query, params)
            if fetch:
                return [dict(row) for row in cursor.fetchall()]
            own.commit()
            return cursor.rowcount
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        finally:
            own.close()

    def _execute_one(self, query: str, params: tuple = ()) -> Optional[dict]:
        """Execute query and return single result."""
        results = self._execute(query, params, fetch=True)
        return results[0] if results else None
