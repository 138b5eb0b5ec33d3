"""
Default configuration values for devtools-wire.

This module contains all default values used throughout the configuration system.
"""

from typing import Any

# Connection defaults (seconds)
DEFAULT_CALL_TIMEOUT = 30.0
DEFAULT_OPEN_TIMEOUT = 10.0
DEFAULT_CLOSE_TIMEOUT = 5.0
DEFAULT_MAX_MESSAGE_SIZE = 100 * 1024 * 1024

# Wait defaults (seconds)
DEFAULT_WAIT_TIMEOUT = 10.0
DEFAULT_POLL_INTERVAL = 0.1

# Tab defaults (seconds)
DEFAULT_ELEMENT_TIMEOUT = 15.0

# Endpoint discovery
DEFAULT_HOST = "127.0.0.1"
DEFAULT_DISCOVERY_TIMEOUT = 5.0

# File config defaults
DEFAULT_CONFIG_FILENAME = "devtools-wire.config"
DEFAULT_CONFIG_EXTENSIONS = [".json", ".yaml", ".yml", ".toml"]
DEFAULT_CONFIG_SEARCH_PATHS = [
    ".",
    "~/.config/devtools-wire",
]

# Environment variable prefix
ENV_PREFIX = "DEVTOOLS_WIRE_"


def get_default_connection_config() -> dict[str, Any]:
    """Get default connection configuration as a dictionary."""
    return {
        "call_timeout": DEFAULT_CALL_TIMEOUT,
        "open_timeout": DEFAULT_OPEN_TIMEOUT,
        "close_timeout": DEFAULT_CLOSE_TIMEOUT,
        "max_message_size": DEFAULT_MAX_MESSAGE_SIZE,
    }


def get_default_wait_config() -> dict[str, Any]:
    """Get default wait configuration as a dictionary."""
    return {
        "timeout": DEFAULT_WAIT_TIMEOUT,
        "poll_interval": DEFAULT_POLL_INTERVAL,
    }
