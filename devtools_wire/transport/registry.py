"""
Call registry.

Correlates responses read by the receive loop with the threads blocked
waiting for them. The registry's map is the single record of in-flight
calls; its lock is only held for bookkeeping, never while a caller waits.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from devtools_wire.errors import CallTimeout, TransportClosed
from devtools_wire.protocol.codec import Response

logger = logging.getLogger(__name__)


class PendingCall:
    """One-shot delivery slot for a single call id."""

    __slots__ = ("call_id", "_done", "_response", "_error")

    def __init__(self, call_id: int) -> None:
        self.call_id = call_id
        self._done = threading.Event()
        self._response: Optional[Response] = None
        self._error: Optional[BaseException] = None

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def _resolve(self, response: Response) -> None:
        self._response = response
        self._done.set()

    def _fail(self, error: BaseException) -> None:
        self._error = error
        self._done.set()

    def _wait(self, timeout: Optional[float]) -> bool:
        return self._done.wait(timeout)

    def __repr__(self) -> str:
        return f"PendingCall(id={self.call_id}, done={self.done})"


class CallRegistry:
    """Map of outstanding call ids to their delivery slots."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: dict[int, PendingCall] = {}
        # Only the reason is kept; each failure raises a new exception.
        self._closed_reason: Optional[str] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    @property
    def closed(self) -> bool:
        return self._closed_reason is not None

    def register(self, call_id: int) -> PendingCall:
        """Allocate a delivery slot for ``call_id``.

        Raises:
            TransportClosed: If the connection was already lost.
            RuntimeError: If ``call_id`` is already pending.
        """
        with self._lock:
            if self._closed_reason is not None:
                raise TransportClosed(self._closed_reason)
            if call_id in self._pending:
                raise RuntimeError(f"Call id {call_id} is already pending")
            pending = PendingCall(call_id)
            self._pending[call_id] = pending
            return pending

    def deliver(self, call_id: int, response: Response) -> bool:
        """Fulfil the slot for ``call_id``.

        Returns:
            False if no call was waiting (late, duplicate or unknown id).
        """
        with self._lock:
            pending = self._pending.pop(call_id, None)

        if pending is None:
            logger.warning(f"Discarding response for unknown call id {call_id}")
            return False

        pending._resolve(response)
        return True

    def discard(self, call_id: int) -> None:
        """Forget a slot whose request never made it onto the wire."""
        with self._lock:
            self._pending.pop(call_id, None)

    def wait_for(
        self,
        pending: PendingCall,
        timeout: Optional[float],
        *,
        method: str = "call",
    ) -> Response:
        """Block until ``pending`` is delivered, failed, or times out.

        Raises:
            CallTimeout: If nothing was delivered within ``timeout`` seconds.
            TransportClosed: If the connection was lost while waiting.
        """
        if not pending._wait(timeout):
            with self._lock:
                expired = self._pending.pop(pending.call_id, None) is not None
            if expired:
                raise CallTimeout(method, pending.call_id, timeout or 0.0)
            # A delivery or failure already claimed the slot and is about to fill it.
            pending._wait(None)

        if pending._error is not None:
            raise pending._error

        assert pending._response is not None
        return pending._response

    def fail_all(self, error: TransportClosed) -> int:
        """Fail every outstanding slot with the reason of ``error``.

        Each waiter, and each later registration, gets a new TransportClosed
        carrying the same reason. Calling this again is a no-op.

        Returns:
            Number of calls that were unblocked.
        """
        with self._lock:
            if self._closed_reason is not None:
                return 0
            self._closed_reason = error.reason
            pending = list(self._pending.values())
            self._pending.clear()

        for call in pending:
            call._fail(TransportClosed(error.reason))

        if pending:
            logger.debug(f"Failed {len(pending)} pending calls: {error}")
        return len(pending)
