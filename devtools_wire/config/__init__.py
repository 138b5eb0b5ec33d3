"""
Configuration for devtools-wire.

Options are pydantic models grouped under WireConfig:

- ``connection``: call, handshake and close timeouts, frame size limit
- ``wait``: default deadline and poll interval of polling waits
- ``tab``: element lookup timeout and the navigation wait

Example:
    from devtools_wire.config import WaitOptions, WireConfig, load_config

    config = load_config(overrides={"connection": {"call_timeout": 60}})
    fast = WireConfig(wait=WaitOptions(timeout=2.0, poll_interval=0.05))

Any option can also come from the environment, e.g.
``DEVTOOLS_WIRE_TAB_NAVIGATION_TIMEOUT=30``.
"""

from devtools_wire.errors import ConfigurationError

from .defaults import (
    DEFAULT_CALL_TIMEOUT,
    DEFAULT_ELEMENT_TIMEOUT,
    DEFAULT_HOST,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_WAIT_TIMEOUT,
    ENV_PREFIX,
    get_default_connection_config,
    get_default_wait_config,
)
from .env import ENV_MAPPINGS, get_env, get_env_key, load_env_config, parse_value
from .loader import ConfigLoader, find_config_file, load_config, load_file, merge_configs
from .options import ConnectionOptions, TabOptions, WaitOptions, WireConfig

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "ConnectionOptions",
    "DEFAULT_CALL_TIMEOUT",
    "DEFAULT_ELEMENT_TIMEOUT",
    "DEFAULT_HOST",
    "DEFAULT_POLL_INTERVAL",
    "DEFAULT_WAIT_TIMEOUT",
    "ENV_MAPPINGS",
    "ENV_PREFIX",
    "TabOptions",
    "WaitOptions",
    "WireConfig",
    "find_config_file",
    "get_default_connection_config",
    "get_default_wait_config",
    "get_env",
    "get_env_key",
    "load_config",
    "load_env_config",
    "load_file",
    "merge_configs",
    "parse_value",
]
