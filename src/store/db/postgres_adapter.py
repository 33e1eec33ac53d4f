"""PostgreSQL database adapter implementation (psycopg 3 with a connection pool)."""

from pathlib import Path
from typing import Any

try:
    import psycopg
    from psycopg.rows import dict_row
    from psycopg_pool import ConnectionPool
except ImportError as e:
    raise ImportError(
        "PostgreSQL dependencies not installed. Install with: pip install -e \".[postgresql]\""
    ) from e

from .interface import DatabaseAdapter
from .types import ConnectionError as DBConnectionError
from .types import DatabaseError, Row, SchemaError
from .types import IntegrityError as DBIntegrityError


class PostgreSQLAdapter(DatabaseAdapter):
    """PostgreSQL database adapter.

    Queries use SQLite-style '?' placeholders and are converted to '%s'.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        database: str = "repo_sync",
        user: str = "postgres",
        password: str = "",
        pool_size: int = 2,
        pool_max_overflow: int = 4,
    ):
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self.pool_size = pool_size
        self.pool_max_overflow = pool_max_overflow

        self._pool: ConnectionPool | None = None
        self._conn: Any = None  # psycopg.Connection
        self._schema_file = Path(__file__).parent / "schema_postgresql.sql"

    def connect(self) -> None:
        """Open the pool and check out one connection."""
        try:
            conninfo = (
                f"host={self.host} port={self.port} dbname={self.database} "
                f"user={self.user} password={self.password}"
            )
            self._pool = ConnectionPool(
                conninfo,
                min_size=self.pool_size,
                max_size=self.pool_size + self.pool_max_overflow,
            )
            self._conn = self._pool.getconn()
            self._conn.row_factory = dict_row
        except psycopg.Error as e:
            raise DBConnectionError(f"Failed to connect to PostgreSQL database: {e}") from e

    def close(self) -> None:
        """Return the connection and close the pool."""
        if self._conn and self._pool:
            self._pool.putconn(self._conn)
            self._conn = None

        if self._pool:
            self._pool.close()
            self._pool = None

    def commit(self) -> None:
        if not self._conn:
            raise DatabaseError("No active connection")
        try:
            self._conn.commit()
        except psycopg.Error as e:
            raise DatabaseError(f"Failed to commit transaction: {e}") from e

    def rollback(self) -> None:
        if not self._conn:
            raise DatabaseError("No active connection")
        try:
            self._conn.rollback()
        except psycopg.Error as e:
            raise DatabaseError(f"Failed to rollback transaction: {e}") from e

    def create_schema(self) -> None:
        """Create all tables and indexes from the schema file."""
        if not self._conn:
            raise DatabaseError("No active connection")

        if not self._schema_file.exists():
            raise SchemaError(f"Schema file not found: {self._schema_file}")

        try:
            with self._conn.cursor() as cursor:
                cursor.execute(self._schema_file.read_text())
            self._conn.commit()
        except psycopg.Error as e:
            raise SchemaError(f"Failed to create schema: {e}") from e
        except OSError as e:
            raise SchemaError(f"Failed to read schema file: {e}") from e

    def get_tables(self) -> list[str]:
        if not self._conn:
            raise DatabaseError("No active connection")

        try:
            query = """
                SELECT table_name
                FROM information_schema.tables
                WHERE table_schema = 'public'
                AND table_type = 'BASE TABLE'
                ORDER BY table_name
            """
            with self._conn.cursor() as cursor:
                cursor.execute(query)
                return [row["table_name"] for row in cursor.fetchall()]
        except psycopg.Error as e:
            raise DatabaseError(f"Failed to get table list: {e}") from e

    def execute(self, query: str, params: tuple | None = None) -> Any:
        if not self._conn:
            raise DatabaseError("No active connection")

        try:
            pg_query = query.replace("?", "%s")
            cursor = self._conn.cursor()
            if params:
                cursor.execute(pg_query, params)
            else:
                cursor.execute(pg_query)
            return cursor
        except psycopg.errors.IntegrityError as e:
            raise DBIntegrityError(f"Integrity constraint violation: {e}") from e
        except psycopg.Error as e:
            raise DatabaseError(f"Query execution failed: {e}") from e

    def fetchone(self, query: str, params: tuple | None = None) -> Row | None:
        row = self.execute(query, params).fetchone()
        return dict(row) if row is not None else None

    def fetchall(self, query: str, params: tuple | None = None) -> list[Row]:
        return [dict(row) for row in self.execute(query, params).fetchall()]

    def drop_schema(self) -> None:
        """Drop all tables in the public schema."""
        if not self._conn:
            raise DatabaseError("No active connection")

        try:
            with self._conn.cursor() as cursor:
                for table in self.get_tables():
                    cursor.execute(f'DROP TABLE IF EXISTS "{table}" CASCADE')
            self._conn.commit()
        except psycopg.Error as e:
            raise SchemaError(f"Failed to drop schema: {e}") from e

    def __repr__(self) -> str:
        status = "connected" if self._conn else "disconnected"
        return (
            f"PostgreSQLAdapter(host={self.host}, port={self.port}, "
            f"database={self.database}, status={status})"
        )
