"""Collaborator interfaces owned by the engine: the applier and the checkpoint store.

In-memory implementations are provided for dry runs and tests; the
database-backed ones live in store.
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime

from .checkpoint import TraversalState
from .errors import StaleVersionError
from .models import Document, ItemState, ItemStatus


class Applier(ABC):
    """Sink that stores documents and exposes the previously accepted state."""

    @abstractmethod
    def previous_state(self, identifier: str) -> ItemState:
        """Return stored state, or ItemState.not_found() for unknown identifiers."""
        pass

    @abstractmethod
    def accept(self, document: Document, cycle: int) -> None:
        """Store a document and mark it ACCEPTED with its fingerprint.

        Raises:
            StaleVersionError: If the stored version is newer than the document's
        """
        pass

    @abstractmethod
    def touch(self, identifier: str, cycle: int) -> None:
        """Re-affirm an unmodified item as seen in this cycle."""
        pass

    @abstractmethod
    def mark_pending(self, identifier: str, cycle: int) -> None:
        """Keep an item whose build failed, so it is rebuilt next time."""
        pass

    @abstractmethod
    def delete(self, identifier: str) -> None:
        """Remove an item and its document. Unknown identifiers are ignored."""
        pass

    @abstractmethod
    def identifiers(self) -> list[str]:
        """List every stored identifier."""
        pass

    @abstractmethod
    def unseen_since(self, cycle: int) -> list[str]:
        """List identifiers not seen during the given cycle."""
        pass


class CheckpointStore(ABC):
    """Persists the traversal state of each connector."""

    @abstractmethod
    def load(self, name: str) -> TraversalState:
        """Return the saved state, or an empty TraversalState."""
        pass

    @abstractmethod
    def save(self, name: str, state: TraversalState) -> None:
        """Atomically replace the saved state."""
        pass

    @abstractmethod
    def clear(self, name: str) -> None:
        """Drop the checkpoint so the next poll starts a new cycle.

        The cycle counter is kept; items stamped with earlier cycles must
        still be detected as Missing.
        """
        pass


class MemoryApplier(Applier):
    """Applier keeping item records and documents in dictionaries."""

    def __init__(self) -> None:
        self.records: dict[str, ItemState] = {}
        self.documents: dict[str, Document] = {}
        self._lock = threading.Lock()

    def previous_state(self, identifier: str) -> ItemState:
        with self._lock:
            return self.records.get(identifier, ItemState.not_found())

    def accept(self, document: Document, cycle: int) -> None:
        with self._lock:
            current = self.records.get(document.identifier)
            if current and current.version is not None and document.version < current.version:
                raise StaleVersionError(
                    f"Version {document.version} of {document.identifier} "
                    f"is older than stored version {current.version}"
                )
            self.documents[document.identifier] = document
            self.records[document.identifier] = ItemState(
                status=ItemStatus.ACCEPTED,
                fingerprint=document.fingerprint,
                version=document.version,
                last_seen_cycle=cycle,
            )

    def touch(self, identifier: str, cycle: int) -> None:
        with self._lock:
            current = self.records.get(identifier)
            if current is not None:
                self.records[identifier] = replace(current, last_seen_cycle=cycle)

    def mark_pending(self, identifier: str, cycle: int) -> None:
        with self._lock:
            current = self.records.get(identifier, ItemState(status=ItemStatus.PENDING))
            self.records[identifier] = replace(
                current, status=ItemStatus.PENDING, last_seen_cycle=cycle
            )

    def delete(self, identifier: str) -> None:
        with self._lock:
            self.records.pop(identifier, None)
            self.documents.pop(identifier, None)

    def identifiers(self) -> list[str]:
        with self._lock:
            return sorted(self.records)

    def unseen_since(self, cycle: int) -> list[str]:
        with self._lock:
            return sorted(
                identifier
                for identifier, state in self.records.items()
                if state.last_seen_cycle is None or state.last_seen_cycle < cycle
            )


class MemoryCheckpointStore(CheckpointStore):
    """Checkpoint store backed by a dictionary."""

    def __init__(self) -> None:
        self.states: dict[str, TraversalState] = {}

    def load(self, name: str) -> TraversalState:
        return self.states.get(name, TraversalState())

    def save(self, name: str, state: TraversalState) -> None:
        self.states[name] = replace(state, updated_at=datetime.now())

    def clear(self, name: str) -> None:
        current = self.load(name)
        self.save(name, TraversalState(checkpoint=None, cycle=current.cycle, in_progress=False))
