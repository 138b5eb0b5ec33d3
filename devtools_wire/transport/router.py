"""
Session router.

Fans inbound events out to the subscribers of the session they belong to.
Events without a session go to browser-level subscribers. Delivery is
best-effort: an event for a session with no subscribers is dropped, and a
new subscription never sees events routed before it existed.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Iterator, Optional

from devtools_wire.protocol.codec import Event

logger = logging.getLogger(__name__)

_CLOSED = object()


class EventStream:
    """Receive side of one subscription.

    Yields events in arrival order. Iteration blocks until the next event and
    ends once the stream is closed, either by the subscriber or because the
    connection went away.

    Example:
        stream = connection.subscribe(session_id)
        for event in stream:
            if event.method == "Page.lifecycleEvent":
                ...
    """

    def __init__(self, router: "SessionRouter", session_id: Optional[str]) -> None:
        self._router = router
        self._session_id = session_id
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._closed = threading.Event()

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def get(self, timeout: Optional[float] = None) -> Optional[Event]:
        """Next event, or None once the stream is closed.

        Raises:
            queue.Empty: If no event arrived within ``timeout`` seconds.
        """
        if self._closed.is_set() and self._queue.empty():
            return None
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            # Leave the marker for any other reader.
            self._queue.put(_CLOSED)
            return None
        return item  # type: ignore[return-value]

    def __iter__(self) -> Iterator[Event]:
        while True:
            event = self.get()
            if event is None:
                return
            yield event

    def close(self) -> None:
        """Unsubscribe; later events for the session are not sent here."""
        self._router.unsubscribe(self)

    def _push(self, event: Event) -> None:
        if not self._closed.is_set():
            self._queue.put(event)

    def _shutdown(self) -> None:
        if not self._closed.is_set():
            self._closed.set()
            self._queue.put(_CLOSED)

    def __repr__(self) -> str:
        return f"EventStream(session_id={self._session_id!r}, closed={self.closed})"


class SessionRouter:
    """Per-session subscriber sets."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: dict[Optional[str], list[EventStream]] = {}
        self._closed = False

    def subscribe(self, session_id: Optional[str]) -> EventStream:
        """Register a new subscriber; ``None`` means browser-level events."""
        stream = EventStream(self, session_id)
        with self._lock:
            if self._closed:
                stream._shutdown()
                return stream
            self._subscribers.setdefault(session_id, []).append(stream)
        logger.debug(f"Subscribed to events for session {session_id}")
        return stream

    def unsubscribe(self, stream: EventStream) -> None:
        with self._lock:
            streams = self._subscribers.get(stream.session_id)
            if streams and stream in streams:
                streams.remove(stream)
                if not streams:
                    del self._subscribers[stream.session_id]
        stream._shutdown()

    def subscriber_count(self, session_id: Optional[str]) -> int:
        with self._lock:
            return len(self._subscribers.get(session_id, ()))

    def route(self, event: Event) -> int:
        """Deliver ``event`` to every current subscriber of its session.

        Returns:
            Number of subscribers the event was delivered to.
        """
        with self._lock:
            streams = list(self._subscribers.get(event.session_id, ()))

        for stream in streams:
            stream._push(event)

        if not streams:
            logger.debug(
                f"Dropped {event.method} for session {event.session_id}: no subscribers"
            )
        return len(streams)

    def close_all(self) -> None:
        """Close every subscription; later subscriptions start closed."""
        with self._lock:
            self._closed = True
            streams = [s for group in self._subscribers.values() for s in group]
            self._subscribers.clear()

        for stream in streams:
            stream._shutdown()
