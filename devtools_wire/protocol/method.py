"""
Typed command contract.

Every remote operation is a Method subclass: a pydantic model holding the
request fields, paired with the ProtocolModel its response decodes into.

Example:
    class GetVersionReturnObject(ProtocolModel):
        product: str
        user_agent: str

    class GetVersion(Method):
        NAME = "Browser.getVersion"
        ReturnObject = GetVersionReturnObject

    version = connection.call_method(GetVersion())
    print(version.product)
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from devtools_wire.errors import DecodeError


class ProtocolModel(BaseModel):
    """Base for protocol data shapes.

    Python attributes are snake_case, wire keys are camelCase. Unknown keys
    sent by newer browsers are ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class EmptyReturnObject(ProtocolModel):
    """Response of commands that return nothing."""


class Method(ProtocolModel):
    """A command request paired with its response shape."""

    NAME: ClassVar[str]
    ReturnObject: ClassVar[type[ProtocolModel]] = EmptyReturnObject

    def to_params(self) -> dict[str, Any]:
        """Wire params for this command."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def parse_return(cls, raw: Any) -> Any:
        """Validate a raw result payload into ReturnObject.

        Raises:
            DecodeError: If the payload does not match the declared shape.
        """
        try:
            return cls.ReturnObject.model_validate(raw)
        except ValidationError as e:
            raise DecodeError(cls.NAME, e.errors()) from e

    def __str__(self) -> str:
        return f"{self.NAME}({self.to_params()})"
