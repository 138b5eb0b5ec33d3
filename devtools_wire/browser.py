"""
Browser: the entry point holding the one connection to a browser process.

The process itself is launched elsewhere; this module attaches to its
DevTools endpoint, keeps track of page targets and hands out Tabs.

Example:
    with Browser.connect_to_port(9222) as browser:
        tab = browser.wait_for_initial_tab()
        tab.navigate_to("https://example.com").wait_until_navigated()
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from devtools_wire.config.defaults import DEFAULT_HOST
from devtools_wire.config.options import WireConfig
from devtools_wire.discovery import fetch_ws_endpoint
from devtools_wire.errors import DecodeError
from devtools_wire.protocol import target
from devtools_wire.protocol.codec import Event
from devtools_wire.tab import Tab
from devtools_wire.transport.connection import Connection
from devtools_wire.wait import Wait

logger = logging.getLogger(__name__)

PAGE_TARGET = "page"


class Browser:
    """A connected browser and the tabs opened through it."""

    def __init__(
        self,
        connection: Connection,
        config: Optional[WireConfig] = None,
    ) -> None:
        self._connection = connection
        self._config = config or WireConfig()
        self._tabs: dict[str, Tab] = {}
        self._tabs_lock = threading.Lock()

        self._events = connection.subscribe(None)
        self._event_thread = threading.Thread(
            target=self._handle_events,
            daemon=True,
            name="browser-events",
        )
        self._event_thread.start()

        connection.call_method_on_browser(target.SetDiscoverTargets(discover=True))

    @classmethod
    def connect(cls, ws_url: str, config: Optional[WireConfig] = None) -> "Browser":
        """Attach to a browser-level DevTools websocket URL."""
        config = config or WireConfig()
        connection = Connection.open(ws_url, config.connection)
        try:
            return cls(connection, config)
        except Exception:
            connection.close()
            raise

    @classmethod
    def connect_to_port(
        cls,
        port: int,
        host: str = DEFAULT_HOST,
        config: Optional[WireConfig] = None,
    ) -> "Browser":
        """Discover the websocket URL on ``host:port`` and attach to it."""
        return cls.connect(fetch_ws_endpoint(port, host), config)

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def config(self) -> WireConfig:
        return self._config

    def get_targets(self) -> list[target.TargetInfo]:
        return self._connection.call_method_on_browser(target.GetTargets()).target_infos

    def get_tabs(self) -> list[Tab]:
        with self._tabs_lock:
            return list(self._tabs.values())

    def new_tab(self, url: str = "about:blank") -> Tab:
        """Open a new page target and attach to it."""
        created = self._connection.call_method_on_browser(target.CreateTarget(url=url))
        target_info = self._find_target(created.target_id)
        if target_info is None:
            target_info = target.TargetInfo(
                target_id=created.target_id, type=PAGE_TARGET, url=url
            )
        return self._add_tab(target_info)

    def wait_for_initial_tab(self, timeout: Optional[float] = None) -> Tab:
        """Attach to the first page target the browser reports.

        Raises:
            WaitTimeout: If no page target shows up in time.
        """
        wait = Wait.from_options(self._config.wait)
        if timeout is not None:
            wait.timeout = timeout

        def first_page() -> Optional[target.TargetInfo]:
            for info in self.get_targets():
                if info.type == PAGE_TARGET:
                    return info
            return None

        target_info = wait.until(first_page, "an initial page target")
        with self._tabs_lock:
            existing = self._tabs.get(target_info.target_id)
        if existing is not None:
            return existing
        return self._add_tab(target_info)

    def _find_target(self, target_id: str) -> Optional[target.TargetInfo]:
        for info in self.get_targets():
            if info.target_id == target_id:
                return info
        return None

    def _add_tab(self, target_info: target.TargetInfo) -> Tab:
        tab = Tab(target_info, self._connection, self._config.tab)
        with self._tabs_lock:
            self._tabs[tab.target_id] = tab
        logger.debug(f"Tracking tab {tab.target_id}")
        return tab

    def _handle_events(self) -> None:
        for event in self._events:
            try:
                self._on_event(event)
            except DecodeError as e:
                logger.warning(f"Ignoring browser event: {e}")
        logger.debug("Browser event stream ended")

    def _on_event(self, event: Event) -> None:
        if event.method == "Target.targetInfoChanged":
            info = event.parse_params(target.TargetInfoChanged).target_info
            with self._tabs_lock:
                tab = self._tabs.get(info.target_id)
            if tab is not None:
                tab.update_target_info(info)
        elif event.method == "Target.targetDestroyed":
            target_id = event.parse_params(target.TargetDestroyed).target_id
            with self._tabs_lock:
                tab = self._tabs.pop(target_id, None)
            if tab is not None:
                tab.release()
                logger.debug(f"Tab {target_id} was destroyed")

    def close(self) -> None:
        """Close the connection; the browser process keeps running."""
        self._events.close()
        self._connection.close()
        with self._tabs_lock:
            self._tabs.clear()

    def __enter__(self) -> "Browser":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
