"""Factory for database adapters."""

from dataclasses import dataclass
from pathlib import Path

from .interface import DatabaseAdapter
from .sqlite_adapter import SQLiteAdapter
from .types import DatabaseType


@dataclass
class DatabaseConfig:
    """Database configuration container.

    Attributes:
        db_type: 'sqlite' or 'postgresql'
        db_path: SQLite database file (SQLite only)
        host, port, database, user, password: Connection settings (PostgreSQL only)
    """

    db_type: DatabaseType | str
    db_path: Path | None = None
    host: str | None = None
    port: int | None = None
    database: str | None = None
    user: str | None = None
    password: str | None = None
    pool_size: int = 2
    pool_max_overflow: int = 4

    def __post_init__(self):
        """Validate configuration after initialization."""
        if isinstance(self.db_type, str):
            try:
                self.db_type = DatabaseType(self.db_type.lower())
            except ValueError as e:
                raise ValueError(
                    f"Unsupported database type: {self.db_type}. "
                    f"Must be one of: {', '.join(t.value for t in DatabaseType)}"
                ) from e

        if self.db_type == DatabaseType.SQLITE:
            if self.db_path is None:
                raise ValueError("db_path is required for SQLite")
            if isinstance(self.db_path, str):
                self.db_path = Path(self.db_path)

        elif self.db_type == DatabaseType.POSTGRESQL:
            if not all([self.host, self.database, self.user]):
                raise ValueError("host, database, and user are required for PostgreSQL")
            if self.port is None:
                self.port = 5432


def create_database(config: DatabaseConfig) -> DatabaseAdapter:
    """Create the adapter matching the configuration.

    Example:
        >>> adapter = create_database(DatabaseConfig(db_type="sqlite", db_path="data/sync.db"))
    """
    if config.db_type == DatabaseType.SQLITE:
        return SQLiteAdapter(config.db_path)

    # Import here to avoid requiring psycopg when not using PostgreSQL
    from .postgres_adapter import PostgreSQLAdapter

    return PostgreSQLAdapter(
        host=config.host,
        port=config.port,
        database=config.database,
        user=config.user,
        password=config.password or "",
        pool_size=config.pool_size,
        pool_max_overflow=config.pool_max_overflow,
    )


def config_from_env() -> DatabaseConfig:
    """Build a DatabaseConfig from DATABASE_TYPE and related variables."""
    from common.env import env

    if env.database_type().lower() == DatabaseType.POSTGRESQL.value:
        return DatabaseConfig(
            db_type=DatabaseType.POSTGRESQL,
            host=env.postgres_host(),
            port=env.postgres_port(),
            database=env.postgres_database(),
            user=env.postgres_user(),
            password=env.postgres_password(),
            pool_size=env.postgres_pool_size(),
            pool_max_overflow=env.postgres_pool_max_overflow(),
        )
    return DatabaseConfig(db_type=DatabaseType.SQLITE, db_path=env.database_path())


def get_adapter() -> DatabaseAdapter:
    """Create an adapter from environment configuration."""
    return create_database(config_from_env())
