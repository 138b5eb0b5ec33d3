"""
Shared fixtures for devtools-wire tests.

The transport runs against FakeStream, an in-memory stand-in for a
websocket client connection, and FakeBrowser, which answers requests from a
table of canned results.
"""

import json
import queue
import threading
import time
from typing import Any, Callable, Optional, Union

import pytest
from websockets.exceptions import ConnectionClosedOK

from devtools_wire.config.options import ConnectionOptions
from devtools_wire.transport.connection import Connection

_EOF = object()


class FakeStream:
    """Duplex in-memory stream with the websocket send/recv/close surface."""

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self.on_send: Optional[Callable[[dict[str, Any]], None]] = None
        self._inbox: "queue.Queue[object]" = queue.Queue()
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, message: str) -> None:
        if self._closed.is_set():
            raise ConnectionClosedOK(None, None)
        data = json.loads(message)
        self.sent.append(data)
        if self.on_send is not None:
            self.on_send(data)

    def recv(self) -> Union[str, bytes]:
        item = self._inbox.get()
        if item is _EOF:
            self._inbox.put(_EOF)
            raise ConnectionClosedOK(None, None)
        return item  # type: ignore[return-value]

    def push(self, frame: Union[dict[str, Any], str, bytes]) -> None:
        """Queue a frame as if the browser had sent it."""
        if isinstance(frame, dict):
            frame = json.dumps(frame)
        self._inbox.put(frame)

    def close(self) -> None:
        if not self._closed.is_set():
            self._closed.set()
            self._inbox.put(_EOF)


class FakeBrowser:
    """Answers requests written to a FakeStream.

    Methods without a registered answer are left pending.
    """

    def __init__(self, stream: FakeStream) -> None:
        self.stream = stream
        self.calls: list[dict[str, Any]] = []
        self._answers: dict[str, Callable[[dict[str, Any]], Optional[dict[str, Any]]]] = {}
        self._lock = threading.Lock()
        stream.on_send = self._on_send

    def on(
        self,
        method: str,
        result: Optional[dict[str, Any]] = None,
        *,
        error: Optional[dict[str, Any]] = None,
        handler: Optional[Callable[[dict[str, Any]], Optional[dict[str, Any]]]] = None,
    ) -> None:
        """Register the answer for ``method``.

        ``handler`` receives the request and returns the response body
        (``{"result": ...}`` or ``{"error": ...}``), or None to stay silent.
        """
        if handler is None:
            if error is not None:
                body: dict[str, Any] = {"error": error}
            else:
                body = {"result": result if result is not None else {}}
            handler = lambda _message: body  # noqa: E731
        with self._lock:
            self._answers[method] = handler

    def emit(
        self,
        method: str,
        params: Optional[dict[str, Any]] = None,
        session_id: Optional[str] = None,
    ) -> None:
        frame: dict[str, Any] = {"method": method, "params": params or {}}
        if session_id is not None:
            frame["sessionId"] = session_id
        self.stream.push(frame)

    def calls_to(self, method: str) -> list[dict[str, Any]]:
        with self._lock:
            return [c for c in self.calls if c["method"] == method]

    def _on_send(self, message: dict[str, Any]) -> None:
        with self._lock:
            self.calls.append(message)
            handler = self._answers.get(message["method"])
        if handler is None:
            return
        body = handler(message)
        if body is not None:
            reply = {"id": message["id"], **body}
            if "sessionId" in message:
                reply["sessionId"] = message["sessionId"]
            self.stream.push(reply)


@pytest.fixture
def stream() -> FakeStream:
    return FakeStream()


@pytest.fixture
def fake_browser(stream: FakeStream) -> FakeBrowser:
    return FakeBrowser(stream)


@pytest.fixture
def connection(stream: FakeStream, fake_browser: FakeBrowser):
    conn = Connection(
        stream,
        options=ConnectionOptions(call_timeout=2.0, close_timeout=1.0),
        name="test",
    )
    yield conn
    conn.close()


def wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Spin until ``predicate`` holds; fail the test otherwise."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met in time")
        time.sleep(0.005)
