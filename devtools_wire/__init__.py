"""
devtools-wire: a threaded client for the browser remote-debugging protocol.

One websocket per browser carries every call and event. Any number of
threads issue blocking, typed calls concurrently while a single background
reader routes responses to their callers and events to per-session streams.

Basic usage:
    from devtools_wire import Browser

    with Browser.connect_to_port(9222) as browser:
        tab = browser.new_tab()
        tab.navigate_to("https://example.com").wait_until_navigated()
        print(tab.evaluate_value("document.title"))

Low-level usage:
    from devtools_wire import Connection
    from devtools_wire.protocol import target

    with Connection.open(ws_url) as connection:
        infos = connection.call_method(target.GetTargets()).target_infos
        events = connection.subscribe(None)
"""

__version__ = "0.1.0"
__license__ = "MIT"

from devtools_wire.errors import (
    CallTimeout,
    ConfigurationError,
    DecodeError,
    DevToolsError,
    DiscoveryError,
    JavascriptException,
    MalformedFrame,
    NavigationFailed,
    NavigationTimedOut,
    NoElementFound,
    ProtocolError,
    TransportClosed,
    WaitTimeout,
)

from devtools_wire.config import (
    ConnectionOptions,
    TabOptions,
    WaitOptions,
    WireConfig,
    load_config,
)

from devtools_wire.protocol import Event, Method, ProtocolModel, Response

from devtools_wire.transport import (
    CallRegistry,
    Connection,
    EventStream,
    SessionRouter,
    call_method,
)

from devtools_wire.wait import Wait, wait_until

from devtools_wire.tab import Tab

from devtools_wire.browser import Browser

from devtools_wire.discovery import fetch_ws_endpoint

__all__ = [
    # Version
    "__version__",
    # Errors
    "CallTimeout",
    "ConfigurationError",
    "DecodeError",
    "DevToolsError",
    "DiscoveryError",
    "JavascriptException",
    "MalformedFrame",
    "NavigationFailed",
    "NavigationTimedOut",
    "NoElementFound",
    "ProtocolError",
    "TransportClosed",
    "WaitTimeout",
    # Config
    "ConnectionOptions",
    "TabOptions",
    "WaitOptions",
    "WireConfig",
    "load_config",
    # Protocol
    "Event",
    "Method",
    "ProtocolModel",
    "Response",
    # Transport
    "CallRegistry",
    "Connection",
    "EventStream",
    "SessionRouter",
    "call_method",
    # Waiting
    "Wait",
    "wait_until",
    # High level
    "Browser",
    "Tab",
    "fetch_ws_endpoint",
]
