"""Tests for the polling loop."""

from unittest.mock import MagicMock

import pytest

from sync.errors import AuthenticationError, QuotaExceededError, TransientError
from sync.reconciliation import ItemFailure, PollResult
from sync.runner import TraversalRunner


def result(has_more, accepted=0, deleted=0, failures=0, cycle=1):
    return PollResult(
        cycle=cycle,
        has_more=has_more,
        accepted=accepted,
        deleted=deleted,
        failures=[ItemFailure(f"item-{i}", "boom") for i in range(failures)],
    )


@pytest.fixture
def engine():
    engine = MagicMock()
    engine.name = "test"
    return engine


class TestTraversalRunner:
    """Tests for TraversalRunner.run."""

    def test_stops_after_max_cycles(self, engine):
        engine.poll.side_effect = [
            result(True, accepted=1),
            result(False, accepted=1),
            result(True, cycle=2),
            result(False, deleted=1, cycle=2),
        ]
        sleeps = []

        summary = TraversalRunner(engine, poll_interval=5, sleep=sleeps.append).run(max_cycles=2)

        assert summary.polls == 4
        assert summary.cycles == 2
        assert summary.accepted == 2
        assert summary.deleted == 1
        # Sleeps between cycles, not after the last one
        assert sleeps == [5]

    def test_stops_after_max_polls(self, engine):
        engine.poll.return_value = result(True)

        summary = TraversalRunner(engine, sleep=lambda s: None).run(max_polls=3)

        assert summary.polls == 3
        assert summary.cycles == 0
        assert engine.poll.call_count == 3

    def test_quota_error_backs_off_with_retry_after(self, engine):
        engine.poll.side_effect = [QuotaExceededError("rate limited", retry_after=12), result(False)]
        sleeps = []

        summary = TraversalRunner(engine, quota_backoff=60, sleep=sleeps.append).run(max_cycles=1)

        assert sleeps == [12]
        assert summary.retries == 1
        assert summary.cycles == 1

    def test_quota_error_uses_default_backoff(self, engine):
        engine.poll.side_effect = [QuotaExceededError("rate limited"), result(False)]
        sleeps = []

        TraversalRunner(engine, quota_backoff=60, sleep=sleeps.append).run(max_cycles=1)

        assert sleeps == [60]

    def test_transient_error_waits_one_interval(self, engine):
        engine.poll.side_effect = [TransientError("502"), result(False)]
        sleeps = []

        summary = TraversalRunner(engine, poll_interval=7, sleep=sleeps.append).run(max_cycles=1)

        assert sleeps == [7]
        assert summary.retries == 1

    def test_authentication_error_propagates(self, engine):
        engine.poll.side_effect = AuthenticationError("bad credentials")

        with pytest.raises(AuthenticationError):
            TraversalRunner(engine, sleep=lambda s: None).run(max_cycles=1)

    def test_counts_failed_items(self, engine):
        engine.poll.return_value = result(False, failures=2)

        summary = TraversalRunner(engine, sleep=lambda s: None).run(max_cycles=1)

        assert summary.failed_items == 2
