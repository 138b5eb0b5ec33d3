"""
Tests for the polling wait primitive.
"""

import time

import pytest

from devtools_wire.config.options import WaitOptions
from devtools_wire.errors import WaitTimeout
from devtools_wire.wait import Wait, wait_until


class TestWait:
    """Tests for Wait.until."""

    def test_immediate_success(self):
        assert Wait(timeout=1.0, poll_interval=0.01).until(lambda: "ready") == "ready"

    def test_succeeds_after_retries(self):
        attempts = []

        def predicate():
            attempts.append(1)
            return len(attempts) if len(attempts) >= 3 else None

        assert Wait(timeout=1.0, poll_interval=0.01).until(predicate) == 3

    def test_falsy_values_count_as_success(self):
        """Test only None means "not yet"."""
        assert Wait(timeout=0.5, poll_interval=0.01).until(lambda: 0) == 0
        assert Wait(timeout=0.5, poll_interval=0.01).until(lambda: False) is False

    @pytest.mark.parametrize("timeout,interval", [(0.1, 0.02), (0.2, 0.05), (0.15, 0.1)])
    def test_timeout_bounds(self, timeout, interval):
        """Test a never-satisfied wait fails between timeout and timeout + interval."""
        start = time.monotonic()
        with pytest.raises(WaitTimeout) as exc_info:
            Wait(timeout=timeout, poll_interval=interval).until(lambda: None)
        elapsed = time.monotonic() - start

        assert elapsed >= timeout
        # Scheduling slack on busy machines.
        assert elapsed <= timeout + interval + 0.05
        assert exc_info.value.timeout == timeout

    def test_timeout_is_a_timeout_error(self):
        with pytest.raises(TimeoutError):
            Wait(timeout=0.01, poll_interval=0.005).until(lambda: None)

    def test_zero_timeout_checks_once(self):
        calls = []
        with pytest.raises(WaitTimeout):
            Wait(timeout=0, poll_interval=0.01).until(lambda: calls.append(1))
        assert len(calls) == 1

    def test_predicate_errors_propagate(self):
        def predicate():
            raise ValueError("broken")

        with pytest.raises(ValueError):
            Wait(timeout=1.0, poll_interval=0.01).until(predicate)

    def test_description_in_message(self):
        with pytest.raises(WaitTimeout, match="the moon"):
            Wait(timeout=0.01, poll_interval=0.005).until(lambda: None, "the moon")

    def test_from_options(self):
        wait = Wait.from_options(WaitOptions(timeout=3.0, poll_interval=0.5))
        assert wait.timeout == 3.0
        assert wait.poll_interval == 0.5

    def test_defaults(self):
        wait = Wait.from_options(None)
        assert wait.timeout == 10.0
        assert wait.poll_interval == 0.1

    def test_with_timeout(self):
        assert Wait.with_timeout(15.0).timeout == 15.0


class TestWaitUntil:
    """Tests for the wait_until shorthand."""

    def test_returns_value(self):
        assert wait_until(lambda: 42, poll_interval=0.01, timeout=0.5) == 42

    def test_times_out(self):
        with pytest.raises(WaitTimeout):
            wait_until(lambda: None, poll_interval=0.01, timeout=0.05)
