"""
Wire codec.

Outbound commands are framed as ``{"id", "method", "params", "sessionId"?}``.
Inbound frames are either responses (they carry an ``id``) or events (they
carry a ``method`` and no ``id``).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional, TypeVar, Union

from pydantic import BaseModel, ValidationError

from devtools_wire.errors import DecodeError, MalformedFrame
from devtools_wire.protocol.method import Method

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class ResponseError:
    """Error member of a response frame."""

    code: int
    message: str
    data: Optional[Any] = None


@dataclass(frozen=True)
class Response:
    """A frame answering one call id."""

    id: int
    result: dict[str, Any] = field(default_factory=dict)
    error: Optional[ResponseError] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class Event:
    """An unsolicited frame, optionally scoped to a session."""

    method: str
    params: dict[str, Any] = field(default_factory=dict)
    session_id: Optional[str] = None

    def parse_params(self, model: type[M]) -> M:
        """Validate params into a typed event model."""
        try:
            return model.model_validate(self.params)
        except ValidationError as e:
            raise DecodeError(self.method, e.errors()) from e


Frame = Union[Response, Event]


def encode_request(
    call_id: int,
    method: Method,
    session_id: Optional[str] = None,
) -> str:
    """Frame a command as JSON text."""
    message: dict[str, Any] = {
        "id": call_id,
        "method": method.NAME,
        "params": method.to_params(),
    }
    if session_id is not None:
        message["sessionId"] = session_id
    return json.dumps(message)


def decode_frame(raw: Union[str, bytes]) -> Frame:
    """Decode one inbound frame.

    Raises:
        MalformedFrame: If the frame is not JSON, not an object, or is
            neither a response nor an event.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedFrame(f"invalid JSON ({e})", raw) from e

    if not isinstance(data, dict):
        raise MalformedFrame(f"expected an object, got {type(data).__name__}", raw)

    if "id" in data:
        return _decode_response(data, raw)

    if "method" in data:
        params = data.get("params")
        if params is None:
            params = {}
        if not isinstance(params, dict) or not isinstance(data["method"], str):
            raise MalformedFrame("event has invalid method or params", raw)
        return Event(
            method=data["method"],
            params=params,
            session_id=data.get("sessionId"),
        )

    raise MalformedFrame("frame has neither id nor method", raw)


def _decode_response(data: dict[str, Any], raw: Any) -> Response:
    call_id = data["id"]
    if not isinstance(call_id, int) or isinstance(call_id, bool):
        raise MalformedFrame(f"response id is not an integer: {call_id!r}", raw)

    error = data.get("error")
    if error is not None:
        if not isinstance(error, dict):
            raise MalformedFrame("response error is not an object", raw)
        return Response(
            id=call_id,
            error=ResponseError(
                code=error.get("code", -1),
                message=error.get("message", "Unknown error"),
                data=error.get("data"),
            ),
        )

    result = data.get("result")
    if result is None:
        result = {}
    if not isinstance(result, dict):
        raise MalformedFrame("response result is not an object", raw)
    return Response(id=call_id, result=result)
