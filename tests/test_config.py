"""
Tests for devtools-wire configuration system.
"""

import json
from typing import Optional

import pytest
from pydantic import ValidationError

from devtools_wire.config import (
    ENV_MAPPINGS,
    ConfigLoader,
    ConfigurationError,
    ConnectionOptions,
    TabOptions,
    WaitOptions,
    WireConfig,
    find_config_file,
    get_env,
    get_env_key,
    load_config,
    load_env_config,
    load_file,
    merge_configs,
    parse_value,
)


class TestConnectionOptions:
    """Tests for ConnectionOptions class."""

    def test_defaults(self):
        """Test default connection settings."""
        options = ConnectionOptions()
        assert options.call_timeout == 30.0
        assert options.open_timeout == 10.0
        assert options.max_message_size == 100 * 1024 * 1024

    def test_rejects_non_positive_timeout(self):
        """Test call timeouts must be positive."""
        with pytest.raises(ValidationError):
            ConnectionOptions(call_timeout=0)

    def test_unlimited_message_size(self):
        """Test None disables the frame size limit."""
        assert ConnectionOptions(max_message_size=None).max_message_size is None

    def test_merge(self):
        """Test merging keeps values the other side never set."""
        base = ConnectionOptions(call_timeout=5.0, open_timeout=2.0)
        merged = base.merge(ConnectionOptions(call_timeout=60.0))
        assert merged.call_timeout == 60.0
        assert merged.open_timeout == 2.0


class TestWaitOptions:
    """Tests for WaitOptions class."""

    def test_defaults(self):
        options = WaitOptions()
        assert options.timeout == 10.0
        assert options.poll_interval == 0.1

    def test_interval_longer_than_timeout(self):
        """Test poll interval cannot exceed the deadline."""
        with pytest.raises(ValidationError):
            WaitOptions(timeout=1.0, poll_interval=2.0)

    def test_zero_timeout_allowed(self):
        """Test a zero timeout means a single check."""
        assert WaitOptions(timeout=0, poll_interval=0.5).timeout == 0

    def test_rejects_zero_interval(self):
        with pytest.raises(ValidationError):
            WaitOptions(poll_interval=0)


class TestTabOptions:
    """Tests for TabOptions class."""

    def test_merge_navigation(self):
        """Test nested navigation options merge field by field."""
        base = TabOptions(
            element_timeout=3.0,
            navigation=WaitOptions(timeout=20.0, poll_interval=0.2),
        )
        other = TabOptions(navigation=WaitOptions(timeout=5.0))
        merged = base.merge(other)
        assert merged.element_timeout == 3.0
        assert merged.navigation.timeout == 5.0
        assert merged.navigation.poll_interval == 0.2

    def test_element_poll_interval(self):
        assert TabOptions().element_poll_interval == 0.1
        assert "tab.element_poll_interval" in ENV_MAPPINGS
        with pytest.raises(ValidationError):
            TabOptions(element_poll_interval=0)


class TestWireConfig:
    """Tests for WireConfig class."""

    def test_from_dict(self):
        """Test creating config from dictionary."""
        config = WireConfig.from_dict(
            {
                "connection": {"call_timeout": 12.5},
                "tab": {"navigation": {"timeout": 4.0}},
            }
        )
        assert config.connection.call_timeout == 12.5
        assert config.tab.navigation.timeout == 4.0
        assert config.wait.timeout == 10.0

    def test_merge(self):
        """Test merging two configs."""
        base = WireConfig(wait=WaitOptions(timeout=3.0))
        other = WireConfig(connection=ConnectionOptions(call_timeout=9.0))
        merged = base.merge(other)
        assert merged.wait.timeout == 3.0
        assert merged.connection.call_timeout == 9.0

    def test_to_dict_round_trips(self):
        config = WireConfig(tab=TabOptions(element_timeout=1.5))
        assert WireConfig.from_dict(config.to_dict()) == config

    def test_invalid_value(self):
        with pytest.raises(ValidationError):
            WireConfig.from_dict({"wait": {"timeout": -1}})


class TestEnvironment:
    """Tests for environment variable support."""

    def test_get_env_key(self):
        assert get_env_key("connection.call_timeout") == (
            "DEVTOOLS_WIRE_CONNECTION_CALL_TIMEOUT"
        )
        assert get_env_key("wait.poll-interval", prefix="X_") == "X_WAIT_POLL_INTERVAL"

    @pytest.mark.parametrize(
        "value,target_type,expected",
        [
            ("1.5", float, 1.5),
            ("42", int, 42),
            ("yes", bool, True),
            ("off", bool, False),
            ("none", Optional[int], None),
            ("", Optional[int], None),
            ("7", Optional[int], 7),
            ("plain", str, "plain"),
        ],
    )
    def test_parse_value(self, value, target_type, expected):
        assert parse_value(value, target_type) == expected

    def test_get_env(self, monkeypatch):
        monkeypatch.setenv("DEVTOOLS_WIRE_WAIT_TIMEOUT", "2.5")
        assert get_env("wait.timeout", 10.0) == 2.5
        assert get_env("wait.poll_interval", 0.1) == 0.1

    def test_load_env_config(self, monkeypatch):
        monkeypatch.setenv("DEVTOOLS_WIRE_CONNECTION_CALL_TIMEOUT", "60")
        monkeypatch.setenv("DEVTOOLS_WIRE_CONNECTION_MAX_MESSAGE_SIZE", "null")
        monkeypatch.setenv("DEVTOOLS_WIRE_TAB_ELEMENT_TIMEOUT", "3")
        monkeypatch.delenv("DEVTOOLS_WIRE_WAIT_TIMEOUT", raising=False)
        monkeypatch.delenv("DEVTOOLS_WIRE_WAIT_POLL_INTERVAL", raising=False)

        env = load_env_config()
        assert env == {
            "connection": {"call_timeout": 60.0, "max_message_size": None},
            "tab": {"element_timeout": 3.0},
        }

    def test_nested_navigation_options(self, monkeypatch):
        monkeypatch.setenv("DEVTOOLS_WIRE_TAB_NAVIGATION_TIMEOUT", "45")
        monkeypatch.setenv("DEVTOOLS_WIRE_TAB_NAVIGATION_POLL_INTERVAL", "0.5")
        env = load_env_config()
        assert env["tab"]["navigation"] == {"timeout": 45.0, "poll_interval": 0.5}
        assert WireConfig.from_dict(env).tab.navigation.timeout == 45.0

    def test_every_option_has_a_variable(self):
        assert ENV_MAPPINGS["connection.call_timeout"][0] == (
            "DEVTOOLS_WIRE_CONNECTION_CALL_TIMEOUT"
        )
        assert "tab.navigation.poll_interval" in ENV_MAPPINGS
        assert "tab.navigation" not in ENV_MAPPINGS


class TestFileLoading:
    """Tests for configuration files."""

    def test_load_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"wait": {"timeout": 4.0}}))
        assert load_file(path) == {"wait": {"timeout": 4.0}}

    def test_load_yaml(self, tmp_path):
        pytest.importorskip("yaml")
        path = tmp_path / "config.yaml"
        path.write_text("connection:\n  call_timeout: 15\n")
        assert load_file(path) == {"connection": {"call_timeout": 15}}

    def test_load_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[tab]\nelement_timeout = 2.0\n")
        assert load_file(path) == {"tab": {"element_timeout": 2.0}}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_file(tmp_path / "nope.json")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "config.ini"
        path.write_text("[wait]\n")
        with pytest.raises(ConfigurationError, match="Unsupported"):
            load_file(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="Could not parse"):
            load_file(path)

    def test_root_must_be_mapping(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_file(path)

    def test_find_config_file(self, tmp_path):
        assert find_config_file(search_paths=[str(tmp_path)]) is None
        path = tmp_path / "devtools-wire.config.toml"
        path.write_text("")
        assert find_config_file(search_paths=[str(tmp_path)]) == path

    def test_merge_configs(self):
        merged = merge_configs(
            {"wait": {"timeout": 1.0, "poll_interval": 0.1}},
            {"wait": {"timeout": 2.0}},
            {"tab": {"element_timeout": 3.0}},
        )
        assert merged == {
            "wait": {"timeout": 2.0, "poll_interval": 0.1},
            "tab": {"element_timeout": 3.0},
        }


class TestConfigLoader:
    """Tests for source precedence."""

    def test_overrides_beat_env_beat_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "connection": {"call_timeout": 5.0, "open_timeout": 3.0},
                    "wait": {"timeout": 7.0},
                }
            )
        )
        monkeypatch.setenv("DEVTOOLS_WIRE_CONNECTION_CALL_TIMEOUT", "8")
        monkeypatch.setenv("DEVTOOLS_WIRE_WAIT_TIMEOUT", "9")

        config = load_config(path, overrides={"wait": {"timeout": 11.0}})

        assert config.connection.open_timeout == 3.0
        assert config.connection.call_timeout == 8.0
        assert config.wait.timeout == 11.0

    def test_auto_find(self, tmp_path):
        (tmp_path / "devtools-wire.config.json").write_text(
            json.dumps({"tab": {"element_timeout": 1.25}})
        )
        loader = ConfigLoader(search_paths=[str(tmp_path)], load_env=False)
        assert loader.load().tab.element_timeout == 1.25

    def test_defaults_without_sources(self, tmp_path):
        loader = ConfigLoader(search_paths=[str(tmp_path)], load_env=False)
        assert loader.load() == WireConfig()

    def test_explicit_file_must_exist(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "missing.yaml", load_env=False)


class TestDefaults:
    """Tests for default dictionaries."""

    def test_default_dicts_match_options(self):
        from devtools_wire.config import (
            get_default_connection_config,
            get_default_wait_config,
        )

        assert ConnectionOptions(**get_default_connection_config()) == ConnectionOptions()
        assert WaitOptions(**get_default_wait_config()) == WaitOptions()
