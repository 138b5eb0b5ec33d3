"""DOM domain: document access and selector queries."""

from typing import Optional

from pydantic import Field

from devtools_wire.protocol.method import Method, ProtocolModel

NodeId = int


class Node(ProtocolModel):
    node_id: NodeId
    backend_node_id: int
    node_type: int
    node_name: str
    local_name: str = ""
    node_value: str = ""
    child_node_count: Optional[int] = None
    children: Optional[list["Node"]] = None
    attributes: Optional[list[str]] = None
    document_url: Optional[str] = Field(default=None, alias="documentURL")


class GetDocumentReturnObject(ProtocolModel):
    root: Node


class GetDocument(Method):
    NAME = "DOM.getDocument"
    ReturnObject = GetDocumentReturnObject

    depth: Optional[int] = None
    pierce: Optional[bool] = None


class QuerySelectorReturnObject(ProtocolModel):
    node_id: NodeId


class QuerySelector(Method):
    NAME = "DOM.querySelector"
    ReturnObject = QuerySelectorReturnObject

    node_id: NodeId
    selector: str


class QuerySelectorAllReturnObject(ProtocolModel):
    node_ids: list[NodeId]


class QuerySelectorAll(Method):
    NAME = "DOM.querySelectorAll"
    ReturnObject = QuerySelectorAllReturnObject

    node_id: NodeId
    selector: str


class DescribeNodeReturnObject(ProtocolModel):
    node: Node


class DescribeNode(Method):
    NAME = "DOM.describeNode"
    ReturnObject = DescribeNodeReturnObject

    node_id: Optional[NodeId] = None
    backend_node_id: Optional[int] = None
    depth: Optional[int] = None
