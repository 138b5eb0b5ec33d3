"""Page domain: navigation and lifecycle notifications."""

from typing import Optional

from devtools_wire.protocol.method import Method, ProtocolModel

FrameId = str


class Enable(Method):
    NAME = "Page.enable"


class SetLifecycleEventsEnabled(Method):
    NAME = "Page.setLifecycleEventsEnabled"

    enabled: bool


class NavigateReturnObject(ProtocolModel):
    frame_id: FrameId
    loader_id: Optional[str] = None
    error_text: Optional[str] = None


class Navigate(Method):
    NAME = "Page.navigate"
    ReturnObject = NavigateReturnObject

    url: str
    referrer: Optional[str] = None


class Reload(Method):
    """Reload the page, optionally bypassing the cache.

    ``script_to_evaluate`` is injected into every frame after the reload; it
    is ignored for data URL origins.
    """

    NAME = "Page.reload"

    ignore_cache: Optional[bool] = None
    script_to_evaluate: Optional[str] = None


# Event params


class LifecycleEvent(ProtocolModel):
    """Params of ``Page.lifecycleEvent``.

    ``name`` is a milestone such as ``init``, ``load``, ``networkAlmostIdle``
    or ``networkIdle``.
    """

    frame_id: FrameId
    loader_id: str = ""
    name: str
    timestamp: float = 0.0


LIFECYCLE_EVENT = "Page.lifecycleEvent"
