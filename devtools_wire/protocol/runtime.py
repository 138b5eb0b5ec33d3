"""Runtime domain: evaluating script in the page."""

from typing import Any, Optional

from pydantic import Field

from devtools_wire.protocol.method import Method, ProtocolModel

ScriptId = str
ExecutionContextId = int


class RemoteObject(ProtocolModel):
    """Mirror of a JavaScript value living in the page."""

    object_type: str = Field(alias="type")
    subtype: Optional[str] = None
    class_name: Optional[str] = None
    value: Optional[Any] = None
    unserializable_value: Optional[str] = None
    description: Optional[str] = None
    object_id: Optional[str] = None


class CallFrame(ProtocolModel):
    function_name: str
    script_id: ScriptId
    url: str
    line_number: int
    column_number: int


class StackTrace(ProtocolModel):
    description: Optional[str] = None
    call_frames: list[CallFrame] = Field(default_factory=list)
    parent: Optional["StackTrace"] = None


class ExceptionDetails(ProtocolModel):
    """Exception thrown during script compilation or execution."""

    exception_id: int
    text: str
    line_number: int
    column_number: int
    script_id: Optional[ScriptId] = None
    url: Optional[str] = None
    stack_trace: Optional[StackTrace] = None
    exception: Optional[RemoteObject] = None
    execution_context_id: Optional[ExecutionContextId] = None

    def __str__(self) -> str:
        if self.exception is not None and self.exception.description:
            return self.exception.description
        return self.text


class EvaluateReturnObject(ProtocolModel):
    result: RemoteObject
    exception_details: Optional[ExceptionDetails] = None


class Evaluate(Method):
    NAME = "Runtime.evaluate"
    ReturnObject = EvaluateReturnObject

    expression: str
    return_by_value: Optional[bool] = None
    await_promise: Optional[bool] = None
    silent: Optional[bool] = None
