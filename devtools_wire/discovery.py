"""
Debug endpoint discovery.

A browser started with ``--remote-debugging-port`` serves its websocket URL
at ``/json/version``.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from devtools_wire.config.defaults import DEFAULT_DISCOVERY_TIMEOUT, DEFAULT_HOST
from devtools_wire.errors import DiscoveryError

logger = logging.getLogger(__name__)


def fetch_ws_endpoint(
    port: int,
    host: str = DEFAULT_HOST,
    timeout: float = DEFAULT_DISCOVERY_TIMEOUT,
    transport: Optional[httpx.BaseTransport] = None,
) -> str:
    """Return the browser-level websocket URL served on ``host:port``.

    Args:
        port: Remote debugging port.
        host: Host the browser listens on.
        timeout: HTTP timeout in seconds.
        transport: Optional httpx transport, mainly for tests.

    Raises:
        DiscoveryError: If the endpoint is unreachable or the answer lacks
            ``webSocketDebuggerUrl``.
    """
    url = f"http://{host}:{port}/json/version"
    logger.debug(f"Fetching debugger URL from {url}")

    try:
        with httpx.Client(timeout=timeout, transport=transport) as client:
            response = client.get(url)
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise DiscoveryError(f"Could not query {url}: {e}") from e

    ws_url = data.get("webSocketDebuggerUrl") if isinstance(data, dict) else None
    if not ws_url:
        raise DiscoveryError(f"{url} did not return webSocketDebuggerUrl")

    return ws_url
