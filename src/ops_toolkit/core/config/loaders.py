"""Configuration file loading, saving and merging."""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from ops_toolkit.core.config.constants import (
    CONFIG_DIR_ENV,
    DEFAULT_CONFIG_DIR,
    MAX_CONFIG_SIZE,
)
from ops_toolkit.core.exceptions import ConfigLoadError, ConfigPersistError
from ops_toolkit.core.io import atomic_write

logger = logging.getLogger(__name__)


def resolve_config_dir(override: Path | str | None = None) -> Path:
    """Resolve the configuration directory.

    Resolution order:
    1. Explicit override (e.g. --config-dir)
    2. OPS_TOOLKIT_CONFIG_DIR environment variable
    3. ~/.ops-toolkit

    Tilde (~) is expanded in both the override and the environment value.

    Args:
        override: Explicit directory, or None.

    Returns:
        Configuration directory path (not created).

    """
    if override is not None:
        return Path(override).expanduser()

    env_value = os.environ.get(CONFIG_DIR_ENV)
    if env_value:
        return Path(env_value).expanduser()

    return DEFAULT_CONFIG_DIR


def merge_configs(defaults: dict[str, Any], loaded: dict[str, Any]) -> dict[str, Any]:
    """Merge a loaded configuration over the defaults, one level deep.

    Rules:
    - Top-level keys from loaded replace those in defaults
    - When a top-level key holds a dict in both (and a list in neither),
      the two dicts are shallow-merged: loaded's nested keys win, defaults
      fill the gaps
    - Nothing below that second level is merged; a nested dict in loaded
      replaces the default one entirely

    Args:
        defaults: Default configuration tree.
        loaded: Configuration tree read from disk.

    Returns:
        Merged dictionary (new dict, does not share containers with inputs).

    Example:
        >>> merge_configs({"a": {"x": {"p": 1, "q": 2}, "y": 1}}, {"a": {"x": {"p": 9}}})
        {'a': {'x': {'p': 9}, 'y': 1}}

    """
    result = copy.deepcopy(defaults)
    for key, value in loaded.items():
        default_value = result.get(key)
        if isinstance(default_value, dict) and isinstance(value, dict):
            default_value.update(copy.deepcopy(value))
        else:
            result[key] = copy.deepcopy(value)
    return result


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load and parse a YAML config file with safety checks.

    Args:
        path: Path to YAML file.

    Returns:
        Parsed YAML content as dictionary.

    Raises:
        ConfigLoadError: If file cannot be read, is too large, is empty,
            is a directory, or YAML is invalid.

    """
    try:
        # Bounded read instead of stat: the size cap holds even if the file grows
        with path.open("r", encoding="utf-8") as f:
            content = f.read(MAX_CONFIG_SIZE + 1)

        if len(content) > MAX_CONFIG_SIZE:
            raise ConfigLoadError(
                f"Config file {path} is larger than {MAX_CONFIG_SIZE:,} bytes; "
                "refusing to load it."
            )

        parsed = yaml.safe_load(content)

        if parsed is None:
            raise ConfigLoadError(f"Config file {path} is empty or contains only whitespace.")

        if not isinstance(parsed, dict):
            raise ConfigLoadError(
                f"Config file {path} must contain a YAML mapping, got {type(parsed).__name__}."
            )

        return parsed
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in {path}: {e}") from e
    except IsADirectoryError as e:
        raise ConfigLoadError(f"{path} is a directory, not a config file.") from e
    except PermissionError as e:
        raise ConfigLoadError(f"Permission denied reading {path}: {e}") from e
    except FileNotFoundError as e:
        raise ConfigLoadError(f"Config file not found: {path}") from e
    except OSError as e:
        raise ConfigLoadError(f"Cannot read config file {path}: {e}") from e


def dump_yaml(data: dict[str, Any]) -> str:
    """Serialize a configuration tree to YAML, keeping key order.

    Raises:
        yaml.YAMLError: If the tree holds values YAML cannot represent.

    """
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)


def save_yaml_file(path: Path, data: dict[str, Any]) -> None:
    """Write a configuration tree to path atomically.

    The tree is fully serialized before the file is touched, so a value that
    cannot be represented leaves the existing file intact.

    Args:
        path: Target file path.
        data: Configuration tree to write.

    Raises:
        ConfigPersistError: If serialization or the write fails.

    """
    try:
        content = dump_yaml(data)
    except yaml.YAMLError as e:
        raise ConfigPersistError(f"Cannot serialize configuration for {path}: {e}") from e

    try:
        atomic_write(path, content)
    except OSError as e:
        raise ConfigPersistError(f"Failed to write configuration to {path}: {e}") from e

    logger.debug("Saved config to %s", path)
