"""Traversal checkpoints and the per-connector traversal state.

A checkpoint is opaque to everything except the enumerator that produced it.
The concrete encoding is a JSON object with a single field:

    {"remainingUnits": ["org/b", "org/c"]}
"""

import json
from dataclasses import dataclass
from datetime import datetime

from common.constants import CHECKPOINT_UNITS_KEY

from .errors import CheckpointError


@dataclass(frozen=True)
class TraversalCheckpoint:
    """Ordered remainder of units still to be traversed in this cycle."""

    remaining_units: tuple[str, ...] = ()

    def to_bytes(self) -> bytes:
        """Encode the checkpoint for persistence."""
        payload = {CHECKPOINT_UNITS_KEY: list(self.remaining_units)}
        return json.dumps(payload, separators=(",", ":")).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> "TraversalCheckpoint":
        """Decode a checkpoint produced by to_bytes().

        Raises:
            CheckpointError: If the bytes are not a valid checkpoint
        """
        try:
            payload = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CheckpointError(f"Unable to deserialize checkpoint: {e}") from e

        if not isinstance(payload, dict):
            raise CheckpointError("Unable to deserialize checkpoint: expected a JSON object")

        units = payload.get(CHECKPOINT_UNITS_KEY, [])
        if not isinstance(units, list) or not all(isinstance(u, str) for u in units):
            raise CheckpointError(
                f"Unable to deserialize checkpoint: '{CHECKPOINT_UNITS_KEY}' must be a list of strings"
            )
        return cls(remaining_units=tuple(units))


@dataclass(frozen=True)
class TraversalState:
    """What the checkpoint store persists for one connector.

    Attributes:
        checkpoint: Last checkpoint returned by the enumerator, None at the
            start of a cycle
        cycle: Number of the current (or last completed) cycle
        in_progress: True while a cycle has units left to traverse
        updated_at: When the state was last saved
    """

    checkpoint: bytes | None = None
    cycle: int = 0
    in_progress: bool = False
    updated_at: datetime | None = None

    def active_cycle(self) -> int:
        """Cycle number the next poll belongs to."""
        return self.cycle if self.in_progress else self.cycle + 1
