"""
Typed dispatch.

``call_method`` is the single path every remote operation takes: frame the
request under a fresh id, register it, write it, block on the slot, then
decode the result into the command's declared return shape. Nothing here
retries.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from devtools_wire.errors import ProtocolError
from devtools_wire.protocol.codec import encode_request
from devtools_wire.protocol.method import Method

if TYPE_CHECKING:
    from devtools_wire.transport.connection import Connection

logger = logging.getLogger(__name__)


def call_method(
    connection: "Connection",
    method: Method,
    *,
    session_id: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Any:
    """Send ``method`` and wait for its decoded response.

    Args:
        connection: Connection to send on.
        method: Command to send.
        session_id: Session to address; ``None`` targets the browser itself.
        timeout: Seconds to wait for the response; defaults to the
            connection's call timeout.

    Returns:
        An instance of ``method.ReturnObject``.

    Raises:
        TransportClosed: If the connection is or becomes unavailable.
        CallTimeout: If no response arrives in time.
        ProtocolError: If the browser answered with an error.
        DecodeError: If the result does not match ``method.ReturnObject``.
    """
    if timeout is None:
        timeout = connection.call_timeout

    registry = connection.registry
    call_id = connection.next_call_id()
    message = encode_request(call_id, method, session_id)
    pending = registry.register(call_id)

    try:
        connection.send(message)
    except BaseException:
        registry.discard(call_id)
        raise

    logger.debug(f"Sent {method.NAME} (id={call_id}, session={session_id})")
    response = registry.wait_for(pending, timeout, method=method.NAME)

    if response.error is not None:
        error = response.error
        logger.debug(f"{method.NAME} (id={call_id}) failed: {error.code} {error.message}")
        raise ProtocolError(error.code, error.message, error.data)

    return method.parse_return(response.result)
