"""
Tab: one attached page target.

A Tab owns one session on the shared connection. A daemon thread drains the
session's event stream and keeps the navigation flag current; blocking
helpers such as ``wait_until_navigated`` poll that flag.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, TypeVar

from devtools_wire.config.options import TabOptions
from devtools_wire.errors import (
    CallTimeout,
    DecodeError,
    JavascriptException,
    NavigationFailed,
    NavigationTimedOut,
    NoElementFound,
    ProtocolError,
    TransportClosed,
    WaitTimeout,
)
from devtools_wire.protocol import dom, page, profiler, runtime, target
from devtools_wire.protocol.codec import Event
from devtools_wire.protocol.method import Method
from devtools_wire.transport.connection import Connection
from devtools_wire.wait import Wait

logger = logging.getLogger(__name__)

NAVIGATION_STARTED = "init"
NAVIGATION_SETTLED = "networkAlmostIdle"

T = TypeVar("T")


class Tab:
    """A handle to a single page.

    Example:
        tab = browser.new_tab()
        tab.navigate_to("https://example.com").wait_until_navigated()
        title = tab.evaluate_value("document.title")
    """

    def __init__(
        self,
        target_info: target.TargetInfo,
        connection: Connection,
        options: Optional[TabOptions] = None,
    ) -> None:
        """Attach to ``target_info`` and start tracking its lifecycle events.

        Raises:
            ProtocolError: If the browser refuses to attach or enable events.
        """
        self._connection = connection
        self._options = options or TabOptions()
        self._target_id = target_info.target_id
        self._target_info = target_info
        self._info_lock = threading.Lock()
        self._navigating = threading.Event()
        self._detached = False

        attached = connection.call_method_on_browser(
            target.AttachToTarget(target_id=self._target_id, flatten=True)
        )
        self._session_id: str = attached.session_id
        logger.debug(f"New tab attached with session ID: {self._session_id}")

        # Subscribe before enabling events so none are missed.
        self._events = connection.subscribe(self._session_id)

        try:
            self.call_method(page.Enable())
            self.call_method(page.SetLifecycleEventsEnabled(enabled=True))
        except BaseException:
            self.detach()
            raise

        self._event_thread = threading.Thread(
            target=self._handle_events,
            daemon=True,
            name=f"tab-{self._target_id[:8]}-events",
        )
        self._event_thread.start()

    @property
    def target_id(self) -> str:
        return self._target_id

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def url(self) -> str:
        with self._info_lock:
            return self._target_info.url

    @property
    def target_info(self) -> target.TargetInfo:
        with self._info_lock:
            return self._target_info

    @property
    def is_navigating(self) -> bool:
        return self._navigating.is_set()

    def update_target_info(self, target_info: target.TargetInfo) -> None:
        with self._info_lock:
            self._target_info = target_info

    def _handle_events(self) -> None:
        for event in self._events:
            if event.method == page.LIFECYCLE_EVENT:
                self._on_lifecycle_event(event)
        logger.debug(f"Event stream for session {self._session_id} ended")

    def _on_lifecycle_event(self, event: Event) -> None:
        try:
            lifecycle = event.parse_params(page.LifecycleEvent)
        except DecodeError as e:
            logger.warning(f"Ignoring lifecycle event: {e}")
            return

        if lifecycle.name == NAVIGATION_STARTED:
            self._navigating.set()
        elif lifecycle.name == NAVIGATION_SETTLED:
            self._navigating.clear()

    def call_method(self, method: Method, timeout: Optional[float] = None) -> Any:
        """Send a command to this tab's session."""
        logger.debug(f"Calling method: {method}")
        result = self._connection.call_method_on_target(
            self._session_id, method, timeout=timeout
        )
        logger.debug(f"Got result: {repr(result)[:70]}")
        return result

    def navigate_to(self, url: str) -> "Tab":
        """Start navigating; pair with ``wait_until_navigated``.

        Raises:
            NavigationFailed: If the browser reports an error for ``url``.
        """
        result = self.call_method(page.Navigate(url=url))
        if result.error_text:
            raise NavigationFailed(result.error_text)

        logger.info(f"Navigating a tab to {url}")
        return self

    def wait_until_navigated(self) -> "Tab":
        """Block until a navigation has started and then settled.

        Waiting for the start first keeps a navigation whose command returned
        before any lifecycle event from counting as already finished.

        Raises:
            NavigationTimedOut: If either phase exceeds the navigation wait.
        """
        wait = Wait.from_options(self._options.navigation)

        logger.debug("Waiting for the tab to start navigating")
        try:
            wait.until(
                lambda: True if self._navigating.is_set() else None,
                "navigation to start",
            )
        except WaitTimeout as e:
            raise NavigationTimedOut(e.timeout, e.description) from e
        logger.debug("A tab started navigating")

        try:
            wait.until(
                lambda: None if self._navigating.is_set() else True,
                "navigation to finish",
            )
        except WaitTimeout as e:
            raise NavigationTimedOut(e.timeout, e.description) from e
        logger.debug("A tab finished navigating")

        return self

    def reload(
        self,
        ignore_cache: bool = False,
        script_to_evaluate: Optional[str] = None,
    ) -> "Tab":
        self.call_method(
            page.Reload(ignore_cache=ignore_cache, script_to_evaluate=script_to_evaluate)
        )
        return self

    def evaluate(self, expression: str, return_by_value: bool = False) -> runtime.RemoteObject:
        """Evaluate ``expression`` in the page.

        Raises:
            JavascriptException: If the script throws.
        """
        result = self.call_method(
            runtime.Evaluate(expression=expression, return_by_value=return_by_value)
        )
        if result.exception_details is not None:
            raise JavascriptException(str(result.exception_details), result.exception_details)
        return result.result

    def evaluate_value(self, expression: str) -> Any:
        """Evaluate ``expression`` and return its JSON value."""
        return self.evaluate(expression, return_by_value=True).value

    def get_document(self) -> dom.Node:
        return self.call_method(dom.GetDocument(depth=0, pierce=False)).root

    def find_element(self, selector: str) -> dom.NodeId:
        """Node id of the first element matching ``selector``.

        Raises:
            NoElementFound: If nothing matches.
        """
        logger.debug(f"Looking up element via selector: {selector}")
        root_node_id = self.get_document().node_id
        node_id = self.call_method(
            dom.QuerySelector(node_id=root_node_id, selector=selector)
        ).node_id
        # The browser answers 0 when nothing matches.
        if node_id == 0:
            raise NoElementFound(selector)
        return node_id

    def find_elements(self, selector: str) -> list[dom.NodeId]:
        logger.debug(f"Looking up elements via selector: {selector}")
        root_node_id = self.get_document().node_id
        node_ids = self.call_method(
            dom.QuerySelectorAll(node_id=root_node_id, selector=selector)
        ).node_ids
        if not node_ids:
            raise NoElementFound(selector)
        return node_ids

    def wait_for_element(
        self, selector: str, timeout: Optional[float] = None
    ) -> dom.NodeId:
        """Poll until ``selector`` matches an element.

        Protocol errors while the document is changing count as "not yet".

        Raises:
            NoElementFound: If no element appears within the timeout.
        """
        logger.debug(f"Waiting for element with selector: {selector}")
        return self._poll_selector(self.find_element, selector, timeout)

    def wait_for_elements(
        self, selector: str, timeout: Optional[float] = None
    ) -> list[dom.NodeId]:
        """Poll until ``selector`` matches at least one element.

        Raises:
            NoElementFound: If nothing matches within the timeout.
        """
        logger.debug(f"Waiting for elements with selector: {selector}")
        return self._poll_selector(self.find_elements, selector, timeout)

    def _poll_selector(
        self,
        find: Callable[[str], T],
        selector: str,
        timeout: Optional[float],
    ) -> T:
        if timeout is None:
            timeout = self._options.element_timeout
        wait = Wait(timeout=timeout, poll_interval=self._options.element_poll_interval)

        def lookup() -> Optional[T]:
            try:
                return find(selector)
            except NoElementFound:
                return None
            except ProtocolError as e:
                logger.debug(f"Lookup of {selector!r} failed, retrying: {e}")
                return None

        try:
            return wait.until(lookup, f"element {selector!r}")
        except WaitTimeout as e:
            raise NoElementFound(selector) from e

    def describe_node(self, node_id: dom.NodeId) -> dom.Node:
        return self.call_method(dom.DescribeNode(node_id=node_id, depth=100)).node

    def enable_profiler(self) -> "Tab":
        self.call_method(profiler.Enable())
        return self

    def disable_profiler(self) -> "Tab":
        self.call_method(profiler.Disable())
        return self

    def start_js_coverage(self) -> "Tab":
        """Start block-level precise coverage with call counts.

        Requires ``enable_profiler`` first.
        """
        self.call_method(profiler.StartPreciseCoverage(call_count=True, detailed=True))
        return self

    def stop_js_coverage(self) -> "Tab":
        self.call_method(profiler.StopPreciseCoverage())
        return self

    def take_precise_js_coverage(self) -> list[profiler.ScriptCoverage]:
        """Coverage collected since the last call; resets the counters."""
        return self.call_method(profiler.TakePreciseCoverage()).result

    def release(self) -> None:
        """Stop the event thread without contacting the browser."""
        self._detached = True
        self._events.close()

    def detach(self) -> None:
        """Detach from the target and stop the event thread."""
        if self._detached:
            return
        self._detached = True

        try:
            self._connection.call_method_on_browser(
                target.DetachFromTarget(session_id=self._session_id)
            )
        except (CallTimeout, ProtocolError, TransportClosed) as e:
            logger.debug(f"Ignoring error detaching session {self._session_id}: {e}")

        self.release()
        logger.debug(f"Detached session {self._session_id}")

    def __repr__(self) -> str:
        return f"Tab(target_id={self._target_id!r}, session_id={self._session_id!r})"
