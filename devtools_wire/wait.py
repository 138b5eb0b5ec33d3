"""
Polling waits.

Turns state that changes asynchronously (updated by event drain threads)
into a blocking call with a deadline.

Example:
    from devtools_wire.wait import Wait

    node_id = Wait(timeout=5.0).until(lambda: lookup_or_none(selector))
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, TypeVar

from devtools_wire.config.defaults import DEFAULT_POLL_INTERVAL, DEFAULT_WAIT_TIMEOUT
from devtools_wire.config.options import WaitOptions
from devtools_wire.errors import WaitTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Wait:
    """Bounded retry of a predicate.

    The predicate returns a value on success or None for "not yet".
    Exceptions raised by the predicate propagate immediately.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_WAIT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.timeout = timeout
        self.poll_interval = poll_interval

    @classmethod
    def with_timeout(cls, timeout: float) -> "Wait":
        return cls(timeout=timeout)

    @classmethod
    def from_options(cls, options: Optional[WaitOptions]) -> "Wait":
        options = options or WaitOptions()
        return cls(timeout=options.timeout, poll_interval=options.poll_interval)

    def until(
        self,
        predicate: Callable[[], Optional[T]],
        description: str = "condition",
    ) -> T:
        """Poll ``predicate`` until it produces a value.

        Raises:
            WaitTimeout: If the deadline passes first. Never raised earlier
                than ``timeout`` seconds after the call.
        """
        start_time = time.monotonic()

        while True:
            result = predicate()
            elapsed = time.monotonic() - start_time
            if result is not None:
                logger.debug(f"Satisfied {description} after {elapsed:.2f}s")
                return result

            if elapsed >= self.timeout:
                raise WaitTimeout(self.timeout, description)

            # Don't sleep past the deadline.
            remaining = self.timeout - elapsed
            time.sleep(min(self.poll_interval, remaining))

    def __repr__(self) -> str:
        return f"Wait(timeout={self.timeout}, poll_interval={self.poll_interval})"


def wait_until(
    predicate: Callable[[], Optional[T]],
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    timeout: float = DEFAULT_WAIT_TIMEOUT,
) -> T:
    """Shorthand for ``Wait(timeout, poll_interval).until(predicate)``."""
    return Wait(timeout=timeout, poll_interval=poll_interval).until(predicate)
