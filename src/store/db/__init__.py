"""Database abstraction layer for repo-sync.

Example:
    >>> from store.db import DatabaseConfig, create_database
    >>>
    >>> adapter = create_database(DatabaseConfig(db_type="sqlite", db_path="data/sync.db"))
    >>> adapter.connect()
    >>> adapter.create_schema()
    >>> adapter.close()
"""

from .factory import DatabaseConfig, config_from_env, create_database, get_adapter
from .interface import DatabaseAdapter
from .types import (
    ConnectionError,
    DatabaseError,
    DatabaseType,
    IntegrityError,
    Row,
    SchemaError,
)

__all__ = [
    # Factory
    "DatabaseConfig",
    "config_from_env",
    "create_database",
    "get_adapter",
    # Interface
    "DatabaseAdapter",
    # Types and exceptions
    "DatabaseType",
    "DatabaseError",
    "ConnectionError",
    "IntegrityError",
    "SchemaError",
    "Row",
]
