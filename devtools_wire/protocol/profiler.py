"""Profiler domain: precise JavaScript coverage."""

from typing import Optional

from pydantic import Field

from devtools_wire.protocol.method import Method, ProtocolModel


class CoverageRange(ProtocolModel):
    """Coverage data for a source range."""

    start_offset: int = Field(ge=0)
    end_offset: int = Field(ge=0)
    count: int = Field(ge=0)


class FunctionCoverage(ProtocolModel):
    function_name: str
    ranges: list[CoverageRange]
    is_block_coverage: bool = False


class ScriptCoverage(ProtocolModel):
    """Line coverage of one script loaded by the page."""

    script_id: str
    url: str
    functions: list[FunctionCoverage]


class Enable(Method):
    NAME = "Profiler.enable"


class Disable(Method):
    NAME = "Profiler.disable"


class StartPreciseCoverage(Method):
    NAME = "Profiler.startPreciseCoverage"

    call_count: Optional[bool] = None
    detailed: Optional[bool] = None


class StopPreciseCoverage(Method):
    NAME = "Profiler.stopPreciseCoverage"


class TakePreciseCoverageReturnObject(ProtocolModel):
    result: list[ScriptCoverage]


class TakePreciseCoverage(Method):
    NAME = "Profiler.takePreciseCoverage"
    ReturnObject = TakePreciseCoverageReturnObject
