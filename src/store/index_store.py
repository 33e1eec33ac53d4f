"""Database-backed applier: item records plus the latest accepted documents."""

import json

from common.logger import get_logger
from sync.applier import Applier
from sync.errors import StaleVersionError
from sync.models import Document, ItemState, ItemStatus

from .db import DatabaseAdapter

logger = get_logger(__name__)


class DatabaseApplier(Applier):
    """Applier persisting to the items and documents tables.

    Every write is committed on its own so a crash never leaves a document
    without its item record. The adapter must be connected and its schema
    created before use.
    """

    def __init__(self, adapter: DatabaseAdapter):
        self.adapter = adapter

    def previous_state(self, identifier: str) -> ItemState:
        row = self.adapter.fetchone(
            "SELECT status, fingerprint, version, last_seen_cycle FROM items WHERE identifier = ?",
            (identifier,),
        )
        if row is None:
            return ItemState.not_found()
        return ItemState(
            status=ItemStatus(row["status"]),
            fingerprint=row["fingerprint"],
            version=row["version"],
            last_seen_cycle=row["last_seen_cycle"],
        )

    def accept(self, document: Document, cycle: int) -> None:
        stored_version = self.adapter.fetchscalar(
            "SELECT version FROM items WHERE identifier = ?", (document.identifier,)
        )
        if stored_version is not None and document.version < stored_version:
            raise StaleVersionError(
                f"Version {document.version} of {document.identifier} "
                f"is older than stored version {stored_version}"
            )

        try:
            self.adapter.execute(
                """
                INSERT INTO documents (
                    identifier, parent_identifier, title, url, object_type,
                    structured_fields, content, content_type, version, fingerprint, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (identifier) DO UPDATE SET
                    parent_identifier = excluded.parent_identifier,
                    title = excluded.title,
                    url = excluded.url,
                    object_type = excluded.object_type,
                    structured_fields = excluded.structured_fields,
                    content = excluded.content,
                    content_type = excluded.content_type,
                    version = excluded.version,
                    fingerprint = excluded.fingerprint,
                    created_at = excluded.created_at
                """,
                (
                    document.identifier,
                    document.parent_identifier,
                    document.title,
                    document.url,
                    document.object_type,
                    json.dumps(document.fields.to_dict(), ensure_ascii=False),
                    document.content,
                    document.content_type,
                    document.version,
                    document.fingerprint,
                    document.created_at.isoformat() if document.created_at else None,
                ),
            )
            self._upsert_item(
                document.identifier,
                ItemStatus.ACCEPTED,
                document.fingerprint,
                document.version,
                cycle,
            )
            self.adapter.commit()
        except Exception:
            self.adapter.rollback()
            raise
        logger.debug(f"Accepted {document.identifier} (version {document.version})")

    def touch(self, identifier: str, cycle: int) -> None:
        try:
            self.adapter.execute(
                "UPDATE items SET last_seen_cycle = ? WHERE identifier = ?",
                (cycle, identifier),
            )
            self.adapter.commit()
        except Exception:
            self.adapter.rollback()
            raise

    def mark_pending(self, identifier: str, cycle: int) -> None:
        current = self.previous_state(identifier)
        try:
            if current.status == ItemStatus.NOT_FOUND:
                self._upsert_item(identifier, ItemStatus.PENDING, None, None, cycle)
            else:
                self.adapter.execute(
                    "UPDATE items SET status = ?, last_seen_cycle = ? WHERE identifier = ?",
                    (ItemStatus.PENDING.value, cycle, identifier),
                )
            self.adapter.commit()
        except Exception:
            self.adapter.rollback()
            raise

    def delete(self, identifier: str) -> None:
        try:
            self.adapter.execute("DELETE FROM documents WHERE identifier = ?", (identifier,))
            self.adapter.execute("DELETE FROM items WHERE identifier = ?", (identifier,))
            self.adapter.commit()
        except Exception:
            self.adapter.rollback()
            raise

    def identifiers(self) -> list[str]:
        rows = self.adapter.fetchall("SELECT identifier FROM items ORDER BY identifier")
        return [row["identifier"] for row in rows]

    def unseen_since(self, cycle: int) -> list[str]:
        rows = self.adapter.fetchall(
            """
            SELECT identifier FROM items
            WHERE last_seen_cycle IS NULL OR last_seen_cycle < ?
            ORDER BY identifier
            """,
            (cycle,),
        )
        return [row["identifier"] for row in rows]

    def get_document_record(self, identifier: str) -> dict | None:
        """Return the stored document row with decoded structured fields."""
        row = self.adapter.fetchone("SELECT * FROM documents WHERE identifier = ?", (identifier,))
        if row is None:
            return None
        row["structured_fields"] = json.loads(row["structured_fields"])
        if row["content"] is not None:
            row["content"] = bytes(row["content"])
        return row

    def count_by_status(self) -> dict[str, int]:
        rows = self.adapter.fetchall(
            "SELECT status, COUNT(*) AS total FROM items GROUP BY status ORDER BY status"
        )
        return {row["status"]: row["total"] for row in rows}

    def _upsert_item(
        self,
        identifier: str,
        status: ItemStatus,
        fingerprint: str | None,
        version: int | None,
        cycle: int,
    ) -> None:
        self.adapter.execute(
            """
            INSERT INTO items (identifier, status, fingerprint, version, last_seen_cycle)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT (identifier) DO UPDATE SET
                status = excluded.status,
                fingerprint = excluded.fingerprint,
                version = excluded.version,
                last_seen_cycle = excluded.last_seen_cycle,
                updated_at = CURRENT_TIMESTAMP
            """,
            (identifier, status.value, fingerprint, version, cycle),
        )
