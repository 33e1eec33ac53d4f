"""SQLite database adapter implementation."""

import sqlite3
from pathlib import Path
from typing import Any

from .interface import DatabaseAdapter
from .types import ConnectionError as DBConnectionError
from .types import DatabaseError, Row, SchemaError
from .types import IntegrityError as DBIntegrityError


class SQLiteAdapter(DatabaseAdapter):
    """SQLite database adapter.

    Use ':memory:' as the path for a throwaway database.
    """

    def __init__(self, db_path: str | Path):
        """Initialize SQLite adapter.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None
        self._schema_file = Path(__file__).parent / "schema_sqlite.sql"

    @property
    def in_memory(self) -> bool:
        return str(self.db_path) == ":memory:"

    def connect(self) -> None:
        """Establish database connection."""
        try:
            if not self.in_memory:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        except sqlite3.Error as e:
            raise DBConnectionError(f"Failed to connect to SQLite database: {e}") from e

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def _require_conn(self) -> sqlite3.Connection:
        if not self._conn:
            raise DatabaseError("No active connection")
        return self._conn

    def commit(self) -> None:
        """Commit current transaction."""
        conn = self._require_conn()
        try:
            conn.commit()
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to commit transaction: {e}") from e

    def rollback(self) -> None:
        """Rollback current transaction."""
        conn = self._require_conn()
        try:
            conn.rollback()
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to rollback transaction: {e}") from e

    def create_schema(self) -> None:
        """Create all tables and indexes from the schema file."""
        conn = self._require_conn()

        if not self._schema_file.exists():
            raise SchemaError(f"Schema file not found: {self._schema_file}")

        try:
            conn.executescript(self._schema_file.read_text())
            conn.commit()
        except sqlite3.Error as e:
            raise SchemaError(f"Failed to create schema: {e}") from e
        except OSError as e:
            raise SchemaError(f"Failed to read schema file: {e}") from e

    def get_tables(self) -> list[str]:
        """Get list of all tables in database."""
        conn = self._require_conn()
        try:
            cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
            return [row[0] for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to get table list: {e}") from e

    def execute(self, query: str, params: tuple | None = None) -> Any:
        """Execute a query and return cursor."""
        conn = self._require_conn()
        try:
            cursor = conn.cursor()
            if params:
                cursor.execute(query, params)
            else:
                cursor.execute(query)
            return cursor
        except sqlite3.IntegrityError as e:
            raise DBIntegrityError(f"Integrity constraint violation: {e}") from e
        except sqlite3.Error as e:
            raise DatabaseError(f"Query execution failed: {e}") from e

    def fetchone(self, query: str, params: tuple | None = None) -> Row | None:
        """Execute query and fetch one result as dictionary."""
        row = self.execute(query, params).fetchone()
        return dict(row) if row is not None else None

    def fetchall(self, query: str, params: tuple | None = None) -> list[Row]:
        """Execute query and fetch all results as list of dictionaries."""
        return [dict(row) for row in self.execute(query, params).fetchall()]

    def drop_schema(self) -> None:
        """Drop all tables in SQLite database."""
        conn = self._require_conn()
        try:
            for table in self.get_tables():
                if table != "sqlite_sequence":
                    conn.execute(f"DROP TABLE IF EXISTS {table}")
            conn.commit()
        except sqlite3.Error as e:
            raise SchemaError(f"Failed to drop schema: {e}") from e

    def __repr__(self) -> str:
        status = "connected" if self._conn else "disconnected"
        return f"SQLiteAdapter(db_path={self.db_path}, status={status})"
