"""Cooperative polling loop around the reconciliation engine."""

import time
from collections.abc import Callable
from dataclasses import dataclass

from common.logger import get_logger

from .errors import QuotaExceededError, TransientError
from .reconciliation import ReconciliationEngine

logger = get_logger(__name__)


@dataclass
class RunSummary:
    """Totals over the polls made by one run."""

    polls: int = 0
    cycles: int = 0
    accepted: int = 0
    deleted: int = 0
    failed_items: int = 0
    retries: int = 0


class TraversalRunner:
    """Repeatedly polls an engine.

    Units of a cycle are polled back to back; between cycles the runner
    waits poll_interval seconds. Quota errors back off and retry the same
    checkpoint; other transient errors wait one poll interval. Fatal errors
    (configuration, authentication, corrupt checkpoint) propagate.
    """

    def __init__(
        self,
        engine: ReconciliationEngine,
        poll_interval: float = 30.0,
        quota_backoff: float = 60.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.engine = engine
        self.poll_interval = poll_interval
        self.quota_backoff = quota_backoff
        self._sleep = sleep

    def run(self, max_cycles: int | None = None, max_polls: int | None = None) -> RunSummary:
        """Poll until the limits are reached, or forever when both are None.

        Args:
            max_cycles: Stop after this many completed cycles
            max_polls: Stop after this many poll attempts, failed ones included

        Returns:
            RunSummary of the run
        """
        summary = RunSummary()

        while True:
            if max_cycles is not None and summary.cycles >= max_cycles:
                break
            if max_polls is not None and summary.polls >= max_polls:
                break

            summary.polls += 1
            try:
                result = self.engine.poll()
            except QuotaExceededError as e:
                delay = e.retry_after if e.retry_after is not None else self.quota_backoff
                logger.warning(f"Quota exceeded for {self.engine.name}, retrying in {delay:.0f}s")
                summary.retries += 1
                self._sleep(delay)
                continue
            except TransientError as e:
                logger.warning(
                    f"Transient error for {self.engine.name}: {e}; "
                    f"retrying in {self.poll_interval:.0f}s"
                )
                summary.retries += 1
                self._sleep(self.poll_interval)
                continue

            summary.accepted += result.accepted
            summary.deleted += result.deleted
            summary.failed_items += len(result.failures)

            if result.cycle_complete:
                summary.cycles += 1
                logger.info(f"[green]✓[/green] Completed traversal cycle {result.cycle}")
                if max_cycles is None or summary.cycles < max_cycles:
                    self._sleep(self.poll_interval)

        return summary
