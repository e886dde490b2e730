"""
Base repository with common database operations.
"""

import logging
import sqlite3
from abc import ABC
from contextlib import contextmanager

from database import Database
from services.errors import ConflictError, PersistenceError

logger = logging.getLogger("huay.repositories")


class BaseRepository(ABC):
    """
    Base class for all repositories.

    Provides common database connection management and utilities.
    Raw sqlite3 errors never escape: integrity violations surface as
    ConflictError, everything else as PersistenceError.
    """

    # Track DB paths that have already had schema initialization performed
    _schema_initialized_paths = set()

    def __init__(self, db_path: str):
        """
        Initialize repository with database path.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        # Ensure schema is initialized for this database path (idempotent)
        if db_path not in type(self)._schema_initialized_paths:
            Database(db_path)
            type(self)._schema_initialized_paths.add(db_path)

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory enabled."""
        conn = sqlite3.connect(self.db_path, timeout=10)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA busy_timeout=5000")
        return conn

    @staticmethod
    def _translate(exc: sqlite3.Error) -> Exception:
        if isinstance(exc, sqlite3.IntegrityError):
            return ConflictError(f"Conflicting write: {exc}")
        logger.error(f"Database error: {exc}")
        return PersistenceError(f"Database error: {exc}")

    @contextmanager
    def connection(self):
        """
        Context manager for database connections.

        Automatically commits on success, rolls back on exception,
        and always closes the connection.
        """
        try:
            conn = self.get_connection()
        except sqlite3.Error as exc:
            raise self._translate(exc) from exc
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise self._translate(exc) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def atomic_transaction(self):
        """
        Context manager for atomic transactions with immediate write lock.

        Uses BEGIN IMMEDIATE to acquire a write lock immediately, preventing
        concurrent writes from interleaving. This is essential for operations
        like bet placement and settlement where race conditions could cause
        double-spending or double payouts.

        Usage:
            with self.atomic_transaction() as conn:
                cursor = conn.cursor()
                # Perform atomic operations
                cursor.execute(...)

        The transaction commits on success and rolls back on exception.
        """
        try:
            conn = self.get_connection()
        except sqlite3.Error as exc:
            raise self._translate(exc) from exc
        try:
            cursor = conn.cursor()
            cursor.execute("BEGIN IMMEDIATE")
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise self._translate(exc) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def cursor(self):
        """
        Context manager that yields a cursor with automatic connection management.
        """
        with self.connection() as conn:
            yield conn.cursor()
