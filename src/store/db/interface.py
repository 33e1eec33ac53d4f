"""Abstract database adapter interface.

Adapters give the stores one API over SQLite and PostgreSQL. Queries are
written with '?' placeholders; adapters translate them where needed.
"""

from abc import ABC, abstractmethod
from typing import Any

from .types import Row


class DatabaseAdapter(ABC):
    """Abstract database adapter interface."""

    @abstractmethod
    def connect(self) -> None:
        """Establish database connection.

        Raises:
            ConnectionError: If connection fails
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close database connection."""
        pass

    @abstractmethod
    def commit(self) -> None:
        """Commit current transaction.

        Raises:
            DatabaseError: If commit fails
        """
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Rollback current transaction.

        Raises:
            DatabaseError: If rollback fails
        """
        pass

    @abstractmethod
    def create_schema(self) -> None:
        """Create the items, documents and checkpoints tables if missing.

        Raises:
            SchemaError: If schema creation fails
        """
        pass

    @abstractmethod
    def get_tables(self) -> list[str]:
        """Get list of all tables in database."""
        pass

    @abstractmethod
    def execute(self, query: str, params: tuple | None = None) -> Any:
        """Execute a query and return the cursor.

        Raises:
            DatabaseError: If execution fails
            IntegrityError: If integrity constraint violated
        """
        pass

    @abstractmethod
    def fetchone(self, query: str, params: tuple | None = None) -> Row | None:
        """Execute query and fetch one row as a dictionary, or None."""
        pass

    @abstractmethod
    def fetchall(self, query: str, params: tuple | None = None) -> list[Row]:
        """Execute query and fetch all rows as dictionaries."""
        pass

    def fetchscalar(self, query: str, params: tuple | None = None) -> Any:
        """Execute query and return the first column of the first row."""
        row = self.fetchone(query, params)
        if row is None:
            return None
        return next(iter(row.values()))

    @abstractmethod
    def drop_schema(self) -> None:
        """Drop all tables in the database.

        Raises:
            SchemaError: If schema drop fails
        """
        pass

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        self.close()
        return False
