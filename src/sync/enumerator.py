"""Source enumerator contract and the one-unit-per-call traversal."""

from abc import ABC, abstractmethod

from common.logger import get_logger

from .checkpoint import TraversalCheckpoint
from .models import EnumerationBatch, PushRecord

logger = get_logger(__name__)


class SourceEnumerator(ABC):
    """Produces the identifiers and fingerprints known to a source."""

    @abstractmethod
    def enumerate(self, checkpoint: bytes | None) -> EnumerationBatch:
        """Run one traversal step.

        Args:
            checkpoint: Checkpoint returned by the previous call, or None at
                the start of a cycle

        Returns:
            Batch of push records, the next checkpoint and whether more
            work remains in this cycle

        Raises:
            CheckpointError: If the checkpoint cannot be decoded
            SyncError: If the source cannot be read; the caller retries
                with the same checkpoint
        """
        pass


class UnitEnumerator(SourceEnumerator):
    """Enumerator for sources partitioned into independently failable units.

    Exactly one unit is collected per call. The returned checkpoint holds
    the units after it, in the order list_units() produced them, so a
    failed call can be retried with the same checkpoint without skipping or
    repeating other units. The call that collects the last unit returns no
    checkpoint and has_more=False, as does a call with no pending units
    (that batch is empty). The next call starts a new cycle from
    list_units().
    """

    @abstractmethod
    def list_units(self) -> list[str]:
        """List all units of the source in a deterministic order."""
        pass

    @abstractmethod
    def collect_unit(self, unit: str) -> list[PushRecord]:
        """Collect the push records of a single unit."""
        pass

    def enumerate(self, checkpoint: bytes | None) -> EnumerationBatch:
        if checkpoint is None:
            units = list(self.list_units())
            logger.info(f"Starting traversal over {len(units)} unit(s)")
        else:
            units = list(TraversalCheckpoint.from_bytes(checkpoint).remaining_units)

        if not units:
            logger.info("[green]✓[/green] No units left, traversal cycle complete")
            return EnumerationBatch(records=[], checkpoint=None, has_more=False)

        unit, remaining = units[0], units[1:]
        logger.info(f"Traversing unit {unit} ({len(remaining)} remaining)")
        records = self.collect_unit(unit)
        logger.debug(f"  Collected {len(records)} record(s) from {unit}")

        if not remaining:
            # Last unit of the cycle; the next call starts over
            return EnumerationBatch(records=records, checkpoint=None, has_more=False)

        next_checkpoint = TraversalCheckpoint(remaining_units=tuple(remaining))
        return EnumerationBatch(
            records=records,
            checkpoint=next_checkpoint.to_bytes(),
            has_more=True,
        )
