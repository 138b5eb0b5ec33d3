"""
Environment variable support for devtools-wire configuration.

Every option of WireConfig can be set through a variable named after its
dotted path, e.g. ``tab.navigation.timeout`` is read from
``DEVTOOLS_WIRE_TAB_NAVIGATION_TIMEOUT``.
"""

import os
from typing import Any, Optional, Union, get_args, get_origin

from pydantic import BaseModel

from .defaults import ENV_PREFIX
from .options import WireConfig

_NULL_VALUES = ("none", "null", "")


def get_env_key(key: str, prefix: str = ENV_PREFIX) -> str:
    """Environment variable name for a dotted option path.

    Example:
        get_env_key("connection.call_timeout")
        # -> "DEVTOOLS_WIRE_CONNECTION_CALL_TIMEOUT"
    """
    return prefix + key.upper().replace(".", "_").replace("-", "_")


def parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on", "enabled")


_CONVERTERS = {bool: parse_bool, int: int, float: float}


def parse_value(value: str, target_type: Any) -> Any:
    """Convert the text of a variable to ``target_type``.

    ``Optional[X]`` accepts "none", "null" or an empty string as None.
    Types without a converter are returned as text.
    """
    if get_origin(target_type) is Union:
        if value.strip().lower() in _NULL_VALUES:
            return None
        inner = [arg for arg in get_args(target_type) if arg is not type(None)]
        return parse_value(value, inner[0]) if inner else value

    converter = _CONVERTERS.get(target_type)
    return converter(value) if converter else value


def get_env(
    key: str,
    default: Any = None,
    target_type: Optional[Any] = None,
    prefix: str = ENV_PREFIX,
) -> Any:
    """Read one option from the environment.

    The type comes from ``target_type`` or, failing that, from ``default``.
    """
    value = os.environ.get(get_env_key(key, prefix))
    if value is None:
        return default
    if target_type is None and default is not None:
        target_type = type(default)
    return parse_value(value, target_type) if target_type else value


def _option_paths(model: type[BaseModel], base: str = "") -> dict[str, Any]:
    paths: dict[str, Any] = {}
    for name, field in model.model_fields.items():
        path = f"{base}.{name}" if base else name
        annotation = field.annotation
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            paths.update(_option_paths(annotation, path))
        else:
            paths[path] = annotation
    return paths


# Dotted option path -> (variable name, type), for every WireConfig leaf.
ENV_MAPPINGS = {
    path: (get_env_key(path), annotation)
    for path, annotation in _option_paths(WireConfig).items()
}


def load_env_config(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """Nested dict of the options set in the environment.

    Sections with no variables set are left out.
    """
    result: dict[str, Any] = {}
    for path, (_, annotation) in ENV_MAPPINGS.items():
        raw = os.environ.get(get_env_key(path, prefix))
        if raw is None:
            continue
        *sections, option = path.split(".")
        target = result
        for section in sections:
            target = target.setdefault(section, {})
        target[option] = parse_value(raw, annotation)
    return result
