"""
Protocol layer for devtools-wire.

- codec: framing of requests and decoding of inbound frames
- method: the typed command contract (Method / ProtocolModel)
- target, page, runtime, dom, profiler: the commands the tab layer uses

Domains are imported as modules, mirroring the protocol's own naming:

    from devtools_wire.protocol import page
    connection.call_method(page.Navigate(url="https://example.com"), session_id=sid)
"""

from devtools_wire.protocol import dom, page, profiler, runtime, target
from devtools_wire.protocol.codec import (
    Event,
    Frame,
    Response,
    ResponseError,
    decode_frame,
    encode_request,
)
from devtools_wire.protocol.method import EmptyReturnObject, Method, ProtocolModel

__all__ = [
    # Codec
    "Event",
    "Frame",
    "Response",
    "ResponseError",
    "decode_frame",
    "encode_request",
    # Contract
    "EmptyReturnObject",
    "Method",
    "ProtocolModel",
    # Domains
    "dom",
    "page",
    "profiler",
    "runtime",
    "target",
]
