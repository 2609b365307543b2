"""Persistent configuration store for ops-toolkit.

This package provides the ConfigManager, which owns the active
configuration tree, together with its building blocks: default values
and pydantic models, dot-notation path access, backup snapshots and
pluggable validators.

Usage:
    from ops_toolkit.core.config import ConfigManager, default_validators

    manager = ConfigManager()
    for name, validator in default_validators():
        manager.register_validator(name, validator)
    manager.initialize()

    manager.set("ui.theme", "dark")
    print(manager.get("ui.theme"))  # "dark"
"""

from ops_toolkit.core.config.backups import BackupStore
from ops_toolkit.core.config.constants import (
    BACKUP_DIR_NAME,
    CONFIG_DIR_ENV,
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_DIR,
    DEFAULT_MAX_BACKUPS,
    MAX_CONFIG_SIZE,
)
from ops_toolkit.core.config.loaders import (
    load_yaml_file,
    merge_configs,
    resolve_config_dir,
    save_yaml_file,
)
from ops_toolkit.core.config.manager import ConfigManager, ManagerState
from ops_toolkit.core.config.models import (
    Config,
    DeployConfig,
    LogsConfig,
    MonitorConfig,
    SystemConfig,
    UIConfig,
    get_default_config,
)
from ops_toolkit.core.config.paths import (
    flatten_tree,
    get_nested_value,
    get_path,
    is_valid_path,
    set_nested_value,
)
from ops_toolkit.core.config.validators import (
    RequiredSectionsValidator,
    SchemaValidator,
    ValidationResult,
    Validator,
    ValidatorRegistry,
    default_validators,
)

# Re-export ConfigError for convenience (it's from exceptions, not config)
from ops_toolkit.core.exceptions import ConfigError

__all__ = [
    # Constants
    "BACKUP_DIR_NAME",
    "CONFIG_DIR_ENV",
    "CONFIG_FILE_NAME",
    "DEFAULT_CONFIG_DIR",
    "DEFAULT_MAX_BACKUPS",
    "MAX_CONFIG_SIZE",
    # Exceptions (re-exported for convenience)
    "ConfigError",
    # Manager
    "ConfigManager",
    "ManagerState",
    "BackupStore",
    # Loaders
    "load_yaml_file",
    "merge_configs",
    "resolve_config_dir",
    "save_yaml_file",
    # Models
    "Config",
    "DeployConfig",
    "LogsConfig",
    "MonitorConfig",
    "SystemConfig",
    "UIConfig",
    "get_default_config",
    # Paths
    "flatten_tree",
    "get_nested_value",
    "get_path",
    "is_valid_path",
    "set_nested_value",
    # Validators
    "RequiredSectionsValidator",
    "SchemaValidator",
    "ValidationResult",
    "Validator",
    "ValidatorRegistry",
    "default_validators",
]
