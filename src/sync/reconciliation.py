"""Reconciliation of enumerated items against previously accepted state.

Classification is driven by fingerprint equality only; timestamps and
versions never take part, so clock skew between sources cannot make an item
look stale. One poll of the engine is:

1. load the traversal state of the connector
2. enumerate one step from the saved checkpoint
3. classify every record and build documents for New/Modified items
4. apply the outcomes (accept / touch / delete / mark pending)
5. save the new checkpoint, or at the end of a cycle delete every item
   that was not seen during the cycle (Missing) and reset the checkpoint

Enumeration errors abort the poll before anything is saved. Build errors
are isolated per item.
"""

from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from common.logger import get_logger

from .applier import Applier, CheckpointStore
from .builder import DocumentBuilder
from .checkpoint import TraversalState
from .enumerator import SourceEnumerator
from .errors import AuthenticationError, QuotaExceededError, StaleVersionError, SyncError
from .models import (
    BuildOutcome,
    Built,
    Classification,
    Deleted,
    Failed,
    ItemState,
    ItemStatus,
    PushRecord,
    Unmodified,
)

logger = get_logger(__name__)


def classify(record: PushRecord, state: ItemState) -> Classification:
    """Classify one enumerated record against the applier's stored state.

    Pending items are always rebuilt, even when the fingerprint matches.
    """
    if state.status == ItemStatus.NOT_FOUND:
        return Classification.NEW
    if record.fingerprint is None or record.fingerprint != state.fingerprint:
        return Classification.MODIFIED
    if state.status == ItemStatus.ACCEPTED:
        return Classification.UNMODIFIED
    return Classification.MODIFIED


def reconcile_snapshot(
    enumerated: Mapping[str, str | None],
    states: Mapping[str, ItemState],
) -> dict[str, Classification]:
    """Classify a complete enumeration against a snapshot of stored state.

    Args:
        enumerated: Identifier -> fingerprint for everything the source holds
        states: Identifier -> stored state for everything the applier holds

    Returns:
        Identifier -> classification, including MISSING for stored
        identifiers the source no longer reports
    """
    result = {
        identifier: classify(
            PushRecord(identifier, fingerprint),
            states.get(identifier, ItemState.not_found()),
        )
        for identifier, fingerprint in enumerated.items()
    }
    for identifier, state in states.items():
        if identifier not in enumerated and state.status != ItemStatus.NOT_FOUND:
            result[identifier] = Classification.MISSING
    return result


@dataclass
class ItemFailure:
    """A per-item failure reported by a poll."""

    identifier: str
    error: str
    retryable: bool = True


@dataclass
class PollResult:
    """Summary of one poll."""

    cycle: int
    has_more: bool
    classified: dict[Classification, int] = field(
        default_factory=lambda: {c: 0 for c in Classification}
    )
    accepted: int = 0
    unchanged: int = 0
    deleted: int = 0
    failures: list[ItemFailure] = field(default_factory=list)

    @property
    def cycle_complete(self) -> bool:
        return not self.has_more


class ReconciliationEngine:
    """Drives enumerate → classify → build → apply for one connector."""

    def __init__(
        self,
        name: str,
        enumerator: SourceEnumerator,
        builder: DocumentBuilder,
        applier: Applier,
        checkpoints: CheckpointStore,
        max_workers: int = 1,
    ):
        """Initialize the engine.

        Args:
            name: Connector name, the key of its traversal state
            enumerator: Source enumerator
            builder: Document builder for the same source
            applier: Sink receiving documents
            checkpoints: Store for the traversal state
            max_workers: Threads used to build documents of one batch
        """
        self.name = name
        self.enumerator = enumerator
        self.builder = builder
        self.applier = applier
        self.checkpoints = checkpoints
        self.max_workers = max(1, max_workers)

    def poll(self) -> PollResult:
        """Run one traversal step and reconcile its batch.

        Returns:
            PollResult with counts and per-item failures

        Raises:
            SyncError: If enumeration fails, or if a build hit an
                authentication or quota error. The checkpoint is not
                advanced in either case.
        """
        state = self.checkpoints.load(self.name)
        cycle = state.active_cycle()

        batch = self.enumerator.enumerate(state.checkpoint)
        result = PollResult(cycle=cycle, has_more=batch.has_more)

        # Last record wins when a source reports an identifier twice
        records = list({record.identifier: record for record in batch.records}.values())
        classified = [
            (record, classify(record, self.applier.previous_state(record.identifier)))
            for record in records
        ]
        for _, classification in classified:
            result.classified[classification] += 1

        outcomes = self._build_all(classified)

        fatal: SyncError | None = None
        for outcome in outcomes:
            error = self._apply(outcome, cycle, result)
            if error is not None and fatal is None:
                fatal = error

        if fatal is not None:
            logger.error(f"Poll of {self.name} aborted, checkpoint not advanced: {fatal}")
            raise fatal

        if batch.has_more:
            self.checkpoints.save(
                self.name,
                TraversalState(checkpoint=batch.checkpoint, cycle=cycle, in_progress=True),
            )
        else:
            self._sweep_missing(cycle, result)
            self.checkpoints.save(
                self.name,
                TraversalState(checkpoint=None, cycle=cycle, in_progress=False),
            )

        logger.info(
            f"Poll of {self.name} (cycle {cycle}): "
            f"{result.classified[Classification.NEW]} new, "
            f"{result.classified[Classification.MODIFIED]} modified, "
            f"{result.classified[Classification.UNMODIFIED]} unmodified, "
            f"{result.deleted} deleted, {len(result.failures)} failed"
        )
        return result

    def _build_all(
        self, classified: list[tuple[PushRecord, Classification]]
    ) -> list[BuildOutcome]:
        if self.max_workers == 1 or len(classified) < 2:
            return [self._build_one(pair) for pair in classified]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(self._build_one, classified))

    def _build_one(self, pair: tuple[PushRecord, Classification]) -> BuildOutcome:
        record, classification = pair
        try:
            return self.builder.build(record.identifier, record.fingerprint, classification)
        except Exception as e:
            return Failed(record.identifier, e)

    def _apply(self, outcome: BuildOutcome, cycle: int, result: PollResult) -> SyncError | None:
        """Apply one build outcome. Returns an error that must abort the poll."""
        if isinstance(outcome, Unmodified):
            self.applier.touch(outcome.identifier, cycle)
            result.unchanged += 1
            return None

        if isinstance(outcome, Deleted):
            logger.info(f"Deleting item: {outcome.identifier}")
            self.applier.delete(outcome.identifier)
            result.deleted += 1
            return None

        if isinstance(outcome, Built):
            document = outcome.document
            try:
                self.applier.accept(document, cycle)
            except StaleVersionError as e:
                logger.warning(f"Skipping {document.identifier}: {e}")
                self.applier.touch(document.identifier, cycle)
                result.failures.append(ItemFailure(document.identifier, str(e), retryable=False))
                return None
            result.accepted += 1
            return None

        # Failed
        cause = outcome.cause
        logger.error(f"Unable to build item {outcome.identifier}: {cause}")
        self.applier.mark_pending(outcome.identifier, cycle)
        result.failures.append(ItemFailure(outcome.identifier, str(cause)))
        if isinstance(cause, (AuthenticationError, QuotaExceededError)):
            return cause
        return None

    def _sweep_missing(self, cycle: int, result: PollResult) -> None:
        missing = self.applier.unseen_since(cycle)
        for identifier in missing:
            logger.info(f"Deleting missing item: {identifier}")
            self.applier.delete(identifier)
        result.classified[Classification.MISSING] += len(missing)
        result.deleted += len(missing)
