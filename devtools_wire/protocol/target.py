"""Target domain: discovering, creating and attaching to targets."""

from typing import Optional

from devtools_wire.protocol.method import Method, ProtocolModel

TargetId = str
SessionId = str


class TargetInfo(ProtocolModel):
    target_id: TargetId
    type: str
    title: str = ""
    url: str = ""
    attached: bool = False
    opener_id: Optional[TargetId] = None
    browser_context_id: Optional[str] = None


class GetTargetsReturnObject(ProtocolModel):
    target_infos: list[TargetInfo]


class GetTargets(Method):
    NAME = "Target.getTargets"
    ReturnObject = GetTargetsReturnObject


class CreateTargetReturnObject(ProtocolModel):
    target_id: TargetId


class CreateTarget(Method):
    NAME = "Target.createTarget"
    ReturnObject = CreateTargetReturnObject

    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    browser_context_id: Optional[str] = None
    enable_begin_frame_control: Optional[bool] = None


class AttachToTargetReturnObject(ProtocolModel):
    session_id: SessionId


class AttachToTarget(Method):
    NAME = "Target.attachToTarget"
    ReturnObject = AttachToTargetReturnObject

    target_id: TargetId
    flatten: Optional[bool] = None


class DetachFromTarget(Method):
    NAME = "Target.detachFromTarget"

    session_id: Optional[SessionId] = None


class CloseTargetReturnObject(ProtocolModel):
    success: bool = True


class CloseTarget(Method):
    NAME = "Target.closeTarget"
    ReturnObject = CloseTargetReturnObject

    target_id: TargetId


class SetDiscoverTargets(Method):
    NAME = "Target.setDiscoverTargets"

    discover: bool


# Event params


class TargetCreated(ProtocolModel):
    target_info: TargetInfo


class TargetInfoChanged(ProtocolModel):
    target_info: TargetInfo


class TargetDestroyed(ProtocolModel):
    target_id: TargetId
