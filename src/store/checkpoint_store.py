"""Database-backed checkpoint store."""

from datetime import datetime

from sync.applier import CheckpointStore
from sync.checkpoint import TraversalState

from .db import DatabaseAdapter


class DatabaseCheckpointStore(CheckpointStore):
    """Keeps one traversal state row per connector in the checkpoints table."""

    def __init__(self, adapter: DatabaseAdapter):
        self.adapter = adapter

    def load(self, name: str) -> TraversalState:
        row = self.adapter.fetchone(
            "SELECT checkpoint, cycle, in_progress, updated_at FROM checkpoints WHERE name = ?",
            (name,),
        )
        if row is None:
            return TraversalState()
        checkpoint = row["checkpoint"]
        return TraversalState(
            checkpoint=bytes(checkpoint) if checkpoint is not None else None,
            cycle=int(row["cycle"]),
            in_progress=bool(row["in_progress"]),
            updated_at=datetime.fromisoformat(row["updated_at"]) if row["updated_at"] else None,
        )

    def save(self, name: str, state: TraversalState) -> None:
        try:
            self.adapter.execute(
                """
                INSERT INTO checkpoints (name, checkpoint, cycle, in_progress, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT (name) DO UPDATE SET
                    checkpoint = excluded.checkpoint,
                    cycle = excluded.cycle,
                    in_progress = excluded.in_progress,
                    updated_at = excluded.updated_at
                """,
                (
                    name,
                    state.checkpoint,
                    state.cycle,
                    1 if state.in_progress else 0,
                    datetime.now().isoformat(),
                ),
            )
            self.adapter.commit()
        except Exception:
            self.adapter.rollback()
            raise

    def clear(self, name: str) -> None:
        current = self.load(name)
        self.save(name, TraversalState(checkpoint=None, cycle=current.cycle, in_progress=False))
