"""Tests for merch.config module."""

import pytest
import yaml

from merch.config import (
    DEFAULT_CONFIG,
    ConfigError,
    get_config_file_path,
    get_config_value,
    load_config,
    resolve_line_ending,
    save_config,
    set_config_value,
)


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_when_missing(self, isolated_config):
        """Test that a missing file yields the defaults."""
        assert load_config() == DEFAULT_CONFIG

    def test_merges_with_defaults(self, isolated_config):
        """Test that saved keys override defaults and others are filled in."""
        isolated_config.mkdir(parents=True)
        (isolated_config / "config.yaml").write_text("comment_style: '# {}'\n")

        config = load_config()

        assert config["comment_style"] == "# {}"
        assert config["check_hash"] is True

    def test_empty_file(self, isolated_config):
        isolated_config.mkdir(parents=True)
        (isolated_config / "config.yaml").write_text("")

        assert load_config() == DEFAULT_CONFIG

    def test_invalid_yaml_raises(self, isolated_config):
        isolated_config.mkdir(parents=True)
        (isolated_config / "config.yaml").write_text("key: [unclosed\n")

        with pytest.raises(ConfigError):
            load_config()

    def test_non_mapping_raises(self, isolated_config):
        isolated_config.mkdir(parents=True)
        (isolated_config / "config.yaml").write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_config()


class TestSaveConfig:
    """Tests for save_config function."""

    def test_creates_directory_and_file(self, isolated_config):
        save_config({"check_hash": False})

        path = get_config_file_path()
        assert path.parent == isolated_config
        assert yaml.safe_load(path.read_text()) == {"check_hash": False}


class TestConfigValues:
    """Tests for get_config_value and set_config_value."""

    def test_get_unknown_key(self, isolated_config):
        with pytest.raises(ConfigError, match="Unknown config key"):
            get_config_value("nope")

    def test_set_and_get(self, isolated_config):
        assert set_config_value("comment_style", "# {}") == "# {}"

        assert get_config_value("comment_style") == "# {}"

    @pytest.mark.parametrize("raw,expected", [
        ("true", True),
        ("Yes", True),
        ("off", False),
        ("0", False),
    ])
    def test_boolean_coercion(self, isolated_config, raw, expected):
        assert set_config_value("check_hash", raw) is expected
        assert load_config()["check_hash"] is expected

    def test_invalid_boolean(self, isolated_config):
        with pytest.raises(ConfigError):
            set_config_value("check_hash", "maybe")

    def test_line_ending_is_lowercased(self, isolated_config):
        assert set_config_value("line_ending", "CRLF") == "crlf"

    def test_invalid_line_ending(self, isolated_config):
        with pytest.raises(ConfigError):
            set_config_value("line_ending", "cr")

    def test_comment_style_needs_placeholder(self, isolated_config):
        with pytest.raises(ConfigError):
            set_config_value("comment_style", "//")

    def test_set_unknown_key_does_not_write(self, isolated_config):
        with pytest.raises(ConfigError):
            set_config_value("nope", "1")

        assert not get_config_file_path().exists()


class TestResolveLineEnding:
    """Tests for resolve_line_ending function."""

    def test_values(self):
        assert resolve_line_ending(None) is None
        assert resolve_line_ending("auto") is None
        assert resolve_line_ending("lf") == "\n"
        assert resolve_line_ending("CRLF") == "\r\n"

    def test_invalid(self):
        with pytest.raises(ConfigError):
            resolve_line_ending("unix")
