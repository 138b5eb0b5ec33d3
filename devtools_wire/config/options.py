"""
Configuration options classes for devtools-wire.

This module provides strongly-typed option classes for the connection, the
wait primitive and tabs, with validation via pydantic.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from .defaults import (
    DEFAULT_CALL_TIMEOUT,
    DEFAULT_CLOSE_TIMEOUT,
    DEFAULT_ELEMENT_TIMEOUT,
    DEFAULT_MAX_MESSAGE_SIZE,
    DEFAULT_OPEN_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_WAIT_TIMEOUT,
)


class ConnectionOptions(BaseModel):
    """Options for the websocket connection and remote calls."""

    call_timeout: float = Field(
        DEFAULT_CALL_TIMEOUT, gt=0, description="Seconds to wait for a response"
    )
    open_timeout: float = Field(
        DEFAULT_OPEN_TIMEOUT, gt=0, description="Seconds to wait for the handshake"
    )
    close_timeout: float = Field(
        DEFAULT_CLOSE_TIMEOUT, ge=0, description="Seconds to wait for a clean close"
    )
    max_message_size: Optional[int] = Field(
        DEFAULT_MAX_MESSAGE_SIZE,
        gt=0,
        description="Largest inbound frame in bytes, None for unlimited",
    )

    def merge(self, other: "ConnectionOptions") -> "ConnectionOptions":
        """Merge with another ConnectionOptions, other takes precedence."""
        data = self.model_dump()
        data.update(other.model_dump(exclude_unset=True))
        return ConnectionOptions(**data)


class WaitOptions(BaseModel):
    """Options for polling waits."""

    timeout: float = Field(
        DEFAULT_WAIT_TIMEOUT, ge=0, description="Overall deadline in seconds"
    )
    poll_interval: float = Field(
        DEFAULT_POLL_INTERVAL, gt=0, description="Seconds between checks"
    )

    @model_validator(mode="after")
    def check_interval(self) -> "WaitOptions":
        """Reject a poll interval longer than a non-zero timeout."""
        if self.timeout and self.poll_interval > self.timeout:
            raise ValueError("poll_interval must not exceed timeout")
        return self

    def merge(self, other: "WaitOptions") -> "WaitOptions":
        """Merge with another WaitOptions, other takes precedence."""
        data = self.model_dump()
        data.update(other.model_dump(exclude_unset=True))
        return WaitOptions(**data)


class TabOptions(BaseModel):
    """Options for tab-level operations."""

    element_timeout: float = Field(
        DEFAULT_ELEMENT_TIMEOUT, ge=0, description="Seconds to wait for an element"
    )
    element_poll_interval: float = Field(
        DEFAULT_POLL_INTERVAL, gt=0, description="Seconds between element lookups"
    )
    navigation: WaitOptions = Field(
        default_factory=WaitOptions,
        description="Wait options for each phase of a navigation wait",
    )

    def merge(self, other: "TabOptions") -> "TabOptions":
        """Merge with another TabOptions, other takes precedence."""
        data = self.model_dump()
        other_data = other.model_dump(exclude_unset=True)
        if "navigation" in other_data:
            data["navigation"] = self.navigation.merge(other.navigation).model_dump()
            del other_data["navigation"]
        data.update(other_data)
        return TabOptions(**data)


class WireConfig(BaseModel):
    """Main configuration class combining all options."""

    connection: ConnectionOptions = Field(
        default_factory=ConnectionOptions, description="Connection options"
    )
    wait: WaitOptions = Field(
        default_factory=WaitOptions, description="Default wait options"
    )
    tab: TabOptions = Field(default_factory=TabOptions, description="Tab options")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WireConfig":
        """Create configuration from dictionary."""
        return cls(**data)

    def merge(self, other: "WireConfig") -> "WireConfig":
        """Merge with another WireConfig, other takes precedence."""
        return WireConfig(
            connection=self.connection.merge(other.connection),
            wait=self.wait.merge(other.wait),
            tab=self.tab.merge(other.tab),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump(exclude_none=True)
