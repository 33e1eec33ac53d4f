"""Shared constants for repo-sync.

For environment-based configuration use the env module:
    from common.env import env
    interval = env.poll_interval()
"""

from pathlib import Path

DATA_DIR = Path("./data")
DATABASE_PATH = DATA_DIR / "sync.db"

# JSON key holding the unprocessed units inside an encoded checkpoint
CHECKPOINT_UNITS_KEY = "remainingUnits"

DEFAULT_CONTENT_TYPE = "text/plain"
BINARY_CONTENT_TYPE = "application/octet-stream"

# Connector names accepted by the CLI and SYNC_SOURCE
SOURCES: tuple[str, ...] = ("github", "sample")
