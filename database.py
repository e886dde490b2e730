"""
Database bootstrap.

Constructing a Database makes sure the schema exists and all migrations have
been applied for the given path.
"""

import logging
import sqlite3

from infrastructure.schema_manager import SchemaManager

logger = logging.getLogger("huay.database")


class Database:
    """Thin handle around a migrated SQLite database file."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.use_uri = db_path.startswith("file:")
        SchemaManager(db_path, use_uri=self.use_uri).initialize()

    def get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, uri=self.use_uri)
        conn.row_factory = sqlite3.Row
        return conn
