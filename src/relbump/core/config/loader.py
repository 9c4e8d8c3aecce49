"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import BumpConfig

logger = logging.getLogger(__name__)

# Global cache to avoid reloading config multiple times per session
_config_cache: BumpConfig | None = None


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/relbump/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "relbump" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Project root (defaults to current directory)

    Returns:
        Path to .relbump.json in the project root
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".relbump.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    Nested dicts are merged, not replaced.

    Example:
        >>> base = {"a": 1, "b": {"x": 10, "y": 20}}
        >>> override = {"b": {"y": 30, "z": 40}, "c": 3}
        >>> deep_merge(base, override)
        {"a": 1, "b": {"x": 10, "y": 30, "z": 40}, "c": 3}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open() as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            return None
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None


def _set_nested(config: dict[str, Any], section: str | None, key: str, value: Any) -> None:
    if section is None:
        config[key] = value
        return
    if section not in config or not isinstance(config[section], dict):
        config[section] = {}
    config[section][key] = value


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override all config files.

    Supported env vars:
        RELBUMP_PACKAGE_NAME - overrides package_name
        RELBUMP_PACKAGER - overrides packager
        RELBUMP_RELEASE_MARKER - overrides history.release_marker
        RELBUMP_SKIP_MALFORMED - overrides history.skip_malformed
        RELBUMP_SUBMODULE_PATH - overrides submodule.path

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = {k: (v.copy() if isinstance(v, dict) else v) for k, v in config_dict.items()}

    if package_name := os.environ.get("RELBUMP_PACKAGE_NAME"):
        _set_nested(result, None, "package_name", package_name)

    if packager := os.environ.get("RELBUMP_PACKAGER"):
        _set_nested(result, None, "packager", packager)

    if marker := os.environ.get("RELBUMP_RELEASE_MARKER"):
        _set_nested(result, "history", "release_marker", marker)

    if skip_str := os.environ.get("RELBUMP_SKIP_MALFORMED"):
        skip_value = skip_str.lower() not in ("false", "0", "")
        _set_nested(result, "history", "skip_malformed", skip_value)

    if submodule_path := os.environ.get("RELBUMP_SUBMODULE_PATH"):
        _set_nested(result, "submodule", "path", submodule_path)

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "submodule": {"path": "web", "remote": "origin"},
        "history": {
            "release_marker": "release-{version}",
            "pr_marker": "Merge pull request",
            "skip_malformed": False,
        },
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> BumpConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (RELBUMP_*)
        2. Project config (.relbump.json)
        3. User config (~/.config/relbump/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Project directory to load .relbump.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated BumpConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation

    Example:
        >>> config = load_config()
        >>> config.history.release_marker
        'release-{version}'
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = BumpConfig(**merged)

    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
