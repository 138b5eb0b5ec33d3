"""
Configuration loading for devtools-wire.

Sources, lowest to highest precedence: defaults, a config file (JSON, YAML or
TOML), ``DEVTOOLS_WIRE_*`` environment variables, programmatic overrides.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Union

from devtools_wire.errors import ConfigurationError

from .defaults import (
    DEFAULT_CONFIG_EXTENSIONS,
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_CONFIG_SEARCH_PATHS,
)
from .env import load_env_config
from .options import WireConfig

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _read_yaml(path: Path) -> Any:
    try:
        import yaml
    except ImportError:
        raise ConfigurationError(
            f"Cannot read {path}: YAML support needs PyYAML "
            "(pip install devtools-wire[yaml])"
        )
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def _read_toml(path: Path) -> Any:
    try:
        import tomllib
    except ImportError:
        # Python < 3.11
        try:
            import tomli as tomllib
        except ImportError:
            raise ConfigurationError(
                f"Cannot read {path}: TOML support needs tomli on this Python"
            )
    return tomllib.loads(path.read_text(encoding="utf-8"))


_READERS: dict[str, Callable[[Path], Any]] = {
    ".json": _read_json,
    ".yaml": _read_yaml,
    ".yml": _read_yaml,
    ".toml": _read_toml,
}


def load_file(path: PathLike) -> dict[str, Any]:
    """Read a config file into a dict, choosing the parser by suffix.

    Raises:
        ConfigurationError: If the file is missing, has an unknown suffix,
            cannot be parsed, or does not hold a mapping.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}")

    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise ConfigurationError(f"Unsupported configuration format: {path.suffix}")

    try:
        data = reader(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Could not parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {path}")
    return data


def _candidates(
    filename: str, search_paths: list[str], extensions: list[str]
) -> Iterator[Path]:
    for directory in search_paths:
        base = Path(directory).expanduser()
        for ext in extensions:
            yield base / f"{filename}{ext}"


def find_config_file(
    filename: str = DEFAULT_CONFIG_FILENAME,
    search_paths: Optional[list[str]] = None,
    extensions: Optional[list[str]] = None,
) -> Optional[Path]:
    """First existing ``<dir>/<filename><ext>``, directories searched in order."""
    candidates = _candidates(
        filename,
        search_paths if search_paths is not None else DEFAULT_CONFIG_SEARCH_PATHS,
        extensions if extensions is not None else DEFAULT_CONFIG_EXTENSIONS,
    )
    return next((path for path in candidates if path.is_file()), None)


def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge dicts into a new one; later values win, nested dicts merge."""
    merged: dict[str, Any] = {}
    for config in configs:
        for key, value in config.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = merge_configs(current, value)
            elif isinstance(value, dict):
                merged[key] = merge_configs(value)
            else:
                merged[key] = value
    return merged


class ConfigLoader:
    """Builds a WireConfig from every configured source.

    Example:
        config = ConfigLoader("devtools-wire.config.toml").load(
            {"connection": {"call_timeout": 60}}
        )
    """

    def __init__(
        self,
        config_file: Optional[PathLike] = None,
        search_paths: Optional[list[str]] = None,
        load_env: bool = True,
        auto_find: bool = True,
    ):
        self.config_file = Path(config_file) if config_file else None
        self.search_paths = search_paths or DEFAULT_CONFIG_SEARCH_PATHS
        self.load_env = load_env
        self.auto_find = auto_find

    def _file_path(self) -> Optional[Path]:
        if self.config_file is not None:
            return self.config_file
        if self.auto_find:
            return find_config_file(search_paths=self.search_paths)
        return None

    def sources(
        self, overrides: Optional[dict[str, Any]] = None
    ) -> Iterator[tuple[str, dict[str, Any]]]:
        """Yield ``(label, values)`` for each non-empty source, lowest first."""
        path = self._file_path()
        if path is not None:
            yield str(path), load_file(path)
        if self.load_env:
            env = load_env_config()
            if env:
                yield "environment", env
        if overrides:
            yield "overrides", overrides

    def load(self, overrides: Optional[dict[str, Any]] = None) -> WireConfig:
        """Merge all sources over the defaults.

        Raises:
            ConfigurationError: If the config file cannot be read.
            pydantic.ValidationError: If a merged value is invalid.
        """
        layers = []
        for label, values in self.sources(overrides):
            logger.debug(f"Config from {label}: {sorted(values)}")
            layers.append(values)
        return WireConfig.from_dict(merge_configs(*layers))


def load_config(
    config_file: Optional[PathLike] = None,
    overrides: Optional[dict[str, Any]] = None,
    load_env: bool = True,
) -> WireConfig:
    """Load a WireConfig from file, environment and ``overrides``."""
    return ConfigLoader(config_file=config_file, load_env=load_env).load(overrides)
