"""Environment configuration interface for repo-sync.

All environment variable access is centralized here. Values from a local
.env file are loaded on import.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _split_list(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def sync_source() -> str:
        """Get the connector to run ('github' or 'sample').

        Returns:
            Connector name, defaults to 'sample'
        """
        return os.getenv("SYNC_SOURCE", "sample")

    @staticmethod
    def poll_interval() -> float:
        """Get the pause between polls in seconds.

        Returns:
            Poll interval, defaults to 30 seconds
        """
        return float(os.getenv("SYNC_POLL_INTERVAL", "30"))

    @staticmethod
    def max_workers() -> int:
        """Get the number of threads used to build documents.

        Returns:
            Worker count, defaults to 1 (sequential builds)
        """
        return int(os.getenv("SYNC_MAX_WORKERS", "1"))

    @staticmethod
    def quota_backoff() -> float:
        """Get the back-off applied after a quota error, in seconds.

        Returns:
            Back-off delay, defaults to 60 seconds
        """
        return float(os.getenv("SYNC_QUOTA_BACKOFF", "60"))

    @staticmethod
    def github_repos() -> list[str]:
        """Get the configured GitHub organizations and repositories.

        Entries containing a slash are repositories (owner/name); other
        entries are organizations whose repositories are all traversed.

        Returns:
            List of names, empty when GITHUB_REPOS is unset
        """
        return _split_list(os.getenv("GITHUB_REPOS", ""))

    @staticmethod
    def github_user() -> str | None:
        """Get the GitHub account used for API calls."""
        return os.getenv("GITHUB_USER")

    @staticmethod
    def github_token() -> str | None:
        """Get the GitHub access token."""
        return os.getenv("GITHUB_TOKEN")

    @staticmethod
    def github_api_url() -> str:
        """Get the GitHub REST API base URL.

        Returns:
            API URL, defaults to https://api.github.com
        """
        return os.getenv("GITHUB_API_URL", "https://api.github.com")

    @staticmethod
    def github_requests_per_minute() -> int:
        """Get the client-side GitHub request budget.

        Returns:
            Requests per minute, defaults to 80
        """
        return int(os.getenv("GITHUB_REQUESTS_PER_MINUTE", "80"))

    @staticmethod
    def sample_document_count() -> int:
        """Get the size of the synthetic sample corpus.

        Returns:
            Document count, defaults to 10
        """
        return int(os.getenv("SAMPLE_DOCUMENT_COUNT", "10"))

    @staticmethod
    def sample_traversal() -> str:
        """Get the sample connector mode ('list' or 'full').

        'list' pushes timestamp fingerprints; 'full' pushes none, so every
        document is rebuilt on every cycle.

        Returns:
            Traversal mode, defaults to 'list'
        """
        return os.getenv("SAMPLE_TRAVERSAL", "list")

    @staticmethod
    def database_type() -> str:
        """Get the database type (sqlite or postgresql).

        Returns:
            Database type, defaults to 'sqlite'
        """
        return os.getenv("DATABASE_TYPE", "sqlite")

    @staticmethod
    def database_path() -> Path:
        """Get the SQLite database file path.

        Returns:
            Path to SQLite database file, defaults to ./data/sync.db
        """
        return Path(os.getenv("DATABASE_PATH", "./data/sync.db"))

    @staticmethod
    def postgres_host() -> str:
        return os.getenv("POSTGRES_HOST", "localhost")

    @staticmethod
    def postgres_port() -> int:
        return int(os.getenv("POSTGRES_PORT", "5432"))

    @staticmethod
    def postgres_database() -> str:
        return os.getenv("POSTGRES_DB", "repo_sync")

    @staticmethod
    def postgres_user() -> str:
        return os.getenv("POSTGRES_USER", "repo_sync")

    @staticmethod
    def postgres_password() -> str:
        return os.getenv("POSTGRES_PASSWORD", "")

    @staticmethod
    def postgres_pool_size() -> int:
        return int(os.getenv("POSTGRES_POOL_SIZE", "2"))

    @staticmethod
    def postgres_pool_max_overflow() -> int:
        return int(os.getenv("POSTGRES_POOL_MAX_OVERFLOW", "4"))


# Singleton instance for convenient access
env = Environment()
