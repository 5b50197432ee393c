"""Global configuration management for merch.

Handles user-level preferences stored in ~/.merch/config.yaml
(or $MERCH_CONFIG_DIR/config.yaml):
- comment_style: Template wrapping header lines, e.g. "// {}" or "# {}"
- check_hash: Verify files on disk before splitting
- line_ending: Document line ending, "auto", "lf" or "crlf"
- editor: Command used by `merch edit`
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from merch.hashing import CRLF, LF


class ConfigError(Exception):
    """Raised when there's an error with the configuration."""
    pass


_CONFIG_DIR = Path(os.environ.get("MERCH_CONFIG_DIR", Path.home() / ".merch"))

DEFAULT_CONFIG: Dict[str, Any] = {
    "comment_style": "// {}",
    "check_hash": True,
    "line_ending": "auto",
    "editor": None,
}

_LINE_ENDING_CHOICES = {"auto": None, "lf": LF, "crlf": CRLF}


def get_config_dir() -> Path:
    """Get the merch configuration directory.

    Returns:
        Path to ~/.merch/
    """
    return _CONFIG_DIR


def get_config_file_path() -> Path:
    """Get path to config.yaml file.

    Returns:
        Path to ~/.merch/config.yaml
    """
    return get_config_dir() / "config.yaml"


def load_config() -> Dict[str, Any]:
    """Load configuration, filling in defaults for missing keys.

    Returns:
        Dictionary with every key of DEFAULT_CONFIG.

    Raises:
        ConfigError: If the file exists but is not valid YAML mapping.
    """
    config = dict(DEFAULT_CONFIG)
    config_file = get_config_file_path()

    if not config_file.exists():
        return config

    try:
        with open(config_file, "r") as f:
            loaded = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config from {config_file}: {e}")

    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {config_file} must contain a mapping")

    config.update(loaded)
    return config


def save_config(config: Dict[str, Any]) -> None:
    """Save configuration to ~/.merch/config.yaml.

    Args:
        config: Configuration dictionary to save.
    """
    config_file = get_config_file_path()

    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, "w") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigError(f"Failed to save config to {config_file}: {e}")


def get_config_value(key: str) -> Any:
    """Get a single configuration value.

    Raises:
        ConfigError: If the key is unknown.
    """
    if key not in DEFAULT_CONFIG:
        raise ConfigError(f"Unknown config key: {key}")
    return load_config()[key]


def _coerce_value(key: str, value: str) -> Any:
    """Convert a command-line string into the stored type for `key`."""
    if key == "check_hash":
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off"):
            return False
        raise ConfigError(f"Invalid boolean for {key}: {value}")
    if key == "line_ending":
        lowered = value.strip().lower()
        if lowered not in _LINE_ENDING_CHOICES:
            raise ConfigError(f"Invalid line_ending: {value} (expected auto, lf or crlf)")
        return lowered
    if key == "comment_style" and value.count("{}") != 1:
        raise ConfigError(f'Invalid comment_style: {value} (must contain "{{}}" once)')
    return value


def set_config_value(key: str, value: str) -> Any:
    """Validate and persist a single configuration value.

    Args:
        key: One of the keys in DEFAULT_CONFIG.
        value: Value as typed on the command line.

    Returns:
        The stored (coerced) value.

    Raises:
        ConfigError: If the key is unknown or the value invalid.
    """
    if key not in DEFAULT_CONFIG:
        raise ConfigError(f"Unknown config key: {key}")

    coerced = _coerce_value(key, value)
    config = load_config()
    config[key] = coerced
    save_config(config)
    return coerced


def resolve_line_ending(setting: Optional[str]) -> Optional[str]:
    """Map a line_ending setting to the forced ending, or None for auto.

    Raises:
        ConfigError: If the setting is not auto, lf or crlf.
    """
    if setting is None:
        return None
    try:
        return _LINE_ENDING_CHOICES[setting.lower()]
    except KeyError:
        raise ConfigError(f"Invalid line_ending: {setting} (expected auto, lf or crlf)")
