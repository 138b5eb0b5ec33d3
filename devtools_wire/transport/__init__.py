"""
Transport layer for devtools-wire.

- Connection: the one websocket per browser and its background reader
- CallRegistry: correlates responses with blocked callers
- SessionRouter / EventStream: per-session event fan-out
- call_method: typed request/response dispatch
"""

from devtools_wire.transport.connection import Connection, Stream
from devtools_wire.transport.dispatch import call_method
from devtools_wire.transport.registry import CallRegistry, PendingCall
from devtools_wire.transport.router import EventStream, SessionRouter

__all__ = [
    "CallRegistry",
    "Connection",
    "EventStream",
    "PendingCall",
    "SessionRouter",
    "Stream",
    "call_method",
]
