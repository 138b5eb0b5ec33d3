"""
DevTools websocket connection.

Owns the single duplex stream to a browser process. One background thread
reads every inbound frame and routes it: responses go to the call registry,
events go to the session router. Any number of threads may issue calls
concurrently; each blocks only on its own delivery slot.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Any, Optional, Protocol, Union

from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.sync.client import connect as ws_connect

from devtools_wire.config.options import ConnectionOptions
from devtools_wire.errors import MalformedFrame, TransportClosed
from devtools_wire.protocol.codec import Response, decode_frame
from devtools_wire.protocol.method import Method
from devtools_wire.transport.dispatch import call_method
from devtools_wire.transport.registry import CallRegistry
from devtools_wire.transport.router import EventStream, SessionRouter

logger = logging.getLogger(__name__)


class Stream(Protocol):
    """The part of a websocket client connection the transport uses."""

    def send(self, message: str) -> None: ...

    def recv(self) -> Union[str, bytes]: ...

    def close(self) -> None: ...


class Connection:
    """A multiplexed DevTools connection.

    Example:
        with Connection.open("ws://127.0.0.1:9222/devtools/browser/xxx") as conn:
            targets = conn.call_method(target.GetTargets())
            stream = conn.subscribe(None)
    """

    def __init__(
        self,
        stream: Stream,
        *,
        options: Optional[ConnectionOptions] = None,
        name: str = "devtools",
    ) -> None:
        """Start routing frames read from ``stream``.

        Args:
            stream: An open websocket (or anything with the same
                send/recv/close surface).
            options: Connection options; defaults are used when omitted.
            name: Label used for the reader thread and log lines.
        """
        self._stream = stream
        self._options = options or ConnectionOptions()
        self._name = name
        self._registry = CallRegistry()
        self._router = SessionRouter()
        self._call_ids = itertools.count(1)
        self._id_lock = threading.Lock()
        self._send_lock = threading.Lock()
        self._closed = threading.Event()
        self._closing = False
        self._close_reason = "connection closed"

        self._receive_thread = threading.Thread(
            target=self._receive_loop,
            daemon=True,
            name=f"{name}-receive",
        )
        self._receive_thread.start()

    @classmethod
    def open(
        cls,
        ws_url: str,
        options: Optional[ConnectionOptions] = None,
    ) -> "Connection":
        """Connect to a DevTools websocket URL.

        Raises:
            TransportClosed: If the handshake fails.
        """
        options = options or ConnectionOptions()
        logger.debug(f"Connecting to {ws_url}")
        try:
            ws = ws_connect(
                ws_url,
                open_timeout=options.open_timeout,
                close_timeout=options.close_timeout,
                max_size=options.max_message_size,
            )
        except (OSError, TimeoutError, WebSocketException) as e:
            raise TransportClosed(f"could not connect to {ws_url}: {e}") from e

        logger.info(f"Connected to {ws_url}")
        return cls(ws, options=options)

    @property
    def options(self) -> ConnectionOptions:
        return self._options

    @property
    def call_timeout(self) -> float:
        return self._options.call_timeout

    @property
    def registry(self) -> CallRegistry:
        return self._registry

    @property
    def router(self) -> SessionRouter:
        return self._router

    @property
    def is_connected(self) -> bool:
        return not self._closed.is_set()

    def next_call_id(self) -> int:
        """Mint a call id unique on this connection."""
        with self._id_lock:
            return next(self._call_ids)

    def send(self, message: str) -> None:
        """Write one frame without waiting for any reply.

        Raises:
            TransportClosed: If the stream is gone.
        """
        if self._closed.is_set():
            raise TransportClosed(self._close_reason)

        with self._send_lock:
            try:
                self._stream.send(message)
            except (ConnectionClosed, OSError) as e:
                raise TransportClosed(f"send failed: {e}") from e

    def call_method(
        self,
        method: Method,
        *,
        session_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Send a typed command and wait for its decoded response.

        See :func:`devtools_wire.transport.dispatch.call_method`.
        """
        return call_method(self, method, session_id=session_id, timeout=timeout)

    def call_method_on_browser(self, method: Method, **kwargs: Any) -> Any:
        return self.call_method(method, session_id=None, **kwargs)

    def call_method_on_target(
        self, session_id: str, method: Method, **kwargs: Any
    ) -> Any:
        return self.call_method(method, session_id=session_id, **kwargs)

    def subscribe(self, session_id: Optional[str]) -> EventStream:
        """Subscribe to events of a session, or browser-level events for None."""
        return self._router.subscribe(session_id)

    def unsubscribe(self, stream: EventStream) -> None:
        self._router.unsubscribe(stream)

    def close(self) -> None:
        """Close the stream and fail everything still pending."""
        if self._closed.is_set():
            return

        self._closing = True
        self._close_reason = "connection closed by client"
        try:
            self._stream.close()
        except Exception as e:
            logger.debug(f"Error closing stream: {e}")

        if threading.current_thread() is not self._receive_thread:
            self._receive_thread.join(timeout=self._options.close_timeout)

        # The reader may still be blocked if the stream ignored close().
        self._shutdown(self._close_reason)
        logger.info(f"{self._name} connection closed")

    def _receive_loop(self) -> None:
        """Read frames until the stream ends."""
        reason = "connection closed by browser"
        try:
            while True:
                try:
                    raw = self._stream.recv()
                except ConnectionClosed as e:
                    logger.debug(f"{self._name} stream closed: {e}")
                    break
                except (EOFError, OSError) as e:
                    reason = f"stream error: {e}"
                    logger.debug(f"{self._name} stream ended: {e}")
                    break
                self._handle_frame(raw)
        except Exception as e:
            reason = f"receive loop failed: {e}"
            logger.exception(f"{self._name} receive loop error: {e}")
        finally:
            if not self._closing:
                self._close_reason = reason
            self._shutdown(self._close_reason)

    def _handle_frame(self, raw: Union[str, bytes]) -> None:
        try:
            frame = decode_frame(raw)
        except MalformedFrame as e:
            logger.warning(f"Dropping frame from {self._name}: {e}")
            return

        if isinstance(frame, Response):
            self._registry.deliver(frame.id, frame)
        else:
            self._router.route(frame)

    def _shutdown(self, reason: str) -> None:
        self._closed.set()
        self._registry.fail_all(TransportClosed(reason))
        self._router.close_all()

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_connected else "closed"
        return f"Connection(name={self._name!r}, {state}, pending={len(self._registry)})"
