"""Tests for the in-memory applier and checkpoint store."""

import pytest

from sync.applier import MemoryApplier, MemoryCheckpointStore
from sync.checkpoint import TraversalState
from sync.errors import StaleVersionError
from sync.models import Document, ItemStatus


def document(identifier="A", version=1, fingerprint="f1"):
    return Document(
        identifier=identifier,
        title=identifier,
        url=None,
        object_type="test",
        version=version,
        fingerprint=fingerprint,
    )


class TestMemoryApplier:
    def test_unknown_item_is_not_found(self):
        assert MemoryApplier().previous_state("A").status == ItemStatus.NOT_FOUND

    def test_accept_records_fingerprint_and_cycle(self):
        applier = MemoryApplier()
        applier.accept(document(version=5), cycle=2)

        state = applier.previous_state("A")
        assert state.status == ItemStatus.ACCEPTED
        assert state.fingerprint == "f1"
        assert state.version == 5
        assert state.last_seen_cycle == 2

    def test_older_version_is_rejected(self):
        applier = MemoryApplier()
        applier.accept(document(version=5), cycle=1)

        with pytest.raises(StaleVersionError):
            applier.accept(document(version=4, fingerprint="f2"), cycle=1)
        assert applier.previous_state("A").fingerprint == "f1"

    def test_mark_pending_keeps_fingerprint(self):
        applier = MemoryApplier()
        applier.accept(document(), cycle=1)

        applier.mark_pending("A", cycle=2)

        state = applier.previous_state("A")
        assert state.status == ItemStatus.PENDING
        assert state.fingerprint == "f1"
        assert state.last_seen_cycle == 2

    def test_mark_pending_unknown_item(self):
        applier = MemoryApplier()
        applier.mark_pending("B", cycle=1)
        assert applier.previous_state("B").status == ItemStatus.PENDING

    def test_unseen_since(self):
        applier = MemoryApplier()
        applier.accept(document("A"), cycle=1)
        applier.accept(document("B"), cycle=1)
        applier.touch("A", cycle=2)

        assert applier.unseen_since(2) == ["B"]

    def test_delete_unknown_is_ignored(self):
        applier = MemoryApplier()
        applier.delete("nope")
        assert applier.identifiers() == []


class TestMemoryCheckpointStore:
    def test_load_unknown_returns_empty_state(self):
        assert MemoryCheckpointStore().load("github") == TraversalState()

    def test_save_and_load(self):
        store = MemoryCheckpointStore()
        store.save("github", TraversalState(checkpoint=b"{}", cycle=3, in_progress=True))

        state = store.load("github")
        assert state.checkpoint == b"{}"
        assert state.cycle == 3
        assert state.updated_at is not None

    def test_clear_keeps_cycle(self):
        store = MemoryCheckpointStore()
        store.save("github", TraversalState(checkpoint=b"{}", cycle=3, in_progress=True))

        store.clear("github")

        state = store.load("github")
        assert state.checkpoint is None
        assert state.in_progress is False
        assert state.active_cycle() == 4
