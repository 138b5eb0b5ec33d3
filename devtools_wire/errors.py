"""
Exception hierarchy for devtools-wire.

Every error raised by the library derives from DevToolsError so callers can
catch the whole family at once.
"""

from __future__ import annotations

from typing import Any, Optional


class DevToolsError(Exception):
    """Base class for all devtools-wire errors."""


class TransportClosed(DevToolsError):
    """The connection to the browser is gone.

    Raised to every caller blocked on a pending call when the stream ends,
    and to any caller that tries to send afterwards.
    """

    def __init__(self, reason: str = "connection closed") -> None:
        self.reason = reason
        super().__init__(f"Transport closed: {reason}")


class CallTimeout(DevToolsError, TimeoutError):
    """No response arrived for a call within its deadline."""

    def __init__(self, method: str, call_id: int, timeout: float) -> None:
        self.method = method
        self.call_id = call_id
        self.timeout = timeout
        super().__init__(
            f"Timeout {timeout}s waiting for response to {method} (id={call_id})"
        )


class ProtocolError(DevToolsError):
    """The browser rejected a command with an error response."""

    def __init__(self, code: int, message: str, data: Optional[Any] = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"Protocol error {code}: {message}")


class DecodeError(DevToolsError):
    """A response payload did not match the command's declared return shape."""

    def __init__(self, method: str, errors: Any) -> None:
        self.method = method
        self.errors = errors
        super().__init__(f"Could not decode response to {method}: {errors}")


class MalformedFrame(DevToolsError):
    """An inbound frame is neither a response nor an event."""

    def __init__(self, reason: str, raw: Any = None) -> None:
        self.reason = reason
        self.raw = raw
        super().__init__(f"Malformed frame: {reason}")


class WaitTimeout(DevToolsError, TimeoutError):
    """A polled condition was never satisfied before the deadline."""

    def __init__(self, timeout: float, description: str = "condition") -> None:
        self.timeout = timeout
        self.description = description
        super().__init__(f"Timeout {timeout}s waiting for {description}")


class NavigationTimedOut(WaitTimeout):
    """A tab did not start or finish navigating in time."""


class NavigationFailed(DevToolsError):
    """The browser reported an error for a navigation request."""

    def __init__(self, error_text: str) -> None:
        self.error_text = error_text
        super().__init__(f"Navigate failed: {error_text}")


class NoElementFound(DevToolsError):
    """No DOM element matched a selector."""

    def __init__(self, selector: str) -> None:
        self.selector = selector
        super().__init__(f"No element found for selector: {selector}")


class JavascriptException(DevToolsError):
    """Evaluated script threw an exception inside the page."""

    def __init__(self, text: str, details: Any = None) -> None:
        self.text = text
        self.details = details
        super().__init__(f"JavaScript exception: {text}")


class DiscoveryError(DevToolsError):
    """The browser's websocket endpoint could not be discovered."""


class ConfigurationError(DevToolsError):
    """Configuration loading or parsing error."""
