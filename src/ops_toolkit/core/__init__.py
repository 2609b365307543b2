"""Core module for ops-toolkit configuration and utilities.

This module provides:
- Custom exception hierarchy with OpsToolkitError as base
- The persistent configuration store (see ops_toolkit.core.config)
"""

from ops_toolkit.core.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigPersistError,
    ConfigUninitializedError,
    ConfigValidationError,
    OpsToolkitError,
)

__all__ = [
    "OpsToolkitError",
    "ConfigError",
    "ConfigLoadError",
    "ConfigPersistError",
    "ConfigUninitializedError",
    "ConfigValidationError",
]
