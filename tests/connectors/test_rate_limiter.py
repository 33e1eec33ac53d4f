"""Tests for the GitHub client rate limiter."""

from unittest.mock import patch

from connectors.github.rate_limiter import RateLimiter


class TestRateLimiter:
    def test_allows_requests_within_budget(self):
        limiter = RateLimiter(requests_per_period=3, period_seconds=60)

        with patch("connectors.github.rate_limiter.time.sleep") as mock_sleep:
            for _ in range(3):
                limiter.wait_if_needed()

        mock_sleep.assert_not_called()
        assert len(limiter.request_times) == 3

    def test_sleeps_when_window_is_full(self):
        limiter = RateLimiter(requests_per_period=2, period_seconds=60)

        with patch("connectors.github.rate_limiter.time.sleep") as mock_sleep:
            for _ in range(3):
                limiter.wait_if_needed()

        mock_sleep.assert_called_once()
        assert 59 < mock_sleep.call_args.args[0] <= 60.1

    def test_reset(self):
        limiter = RateLimiter(requests_per_period=1, period_seconds=60)
        limiter.wait_if_needed()

        limiter.reset()

        assert len(limiter.request_times) == 0
