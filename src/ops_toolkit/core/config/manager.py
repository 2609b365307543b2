"""Configuration manager: the single owner of the active configuration.

The manager keeps one configuration tree in memory, persisted as
``config.yaml`` inside the configuration directory. Every mutation is
protected by a backup snapshot and rolled back if persisting or
validating the new tree fails.

Usage:
    from ops_toolkit.core.config import ConfigManager

    manager = ConfigManager()  # ~/.ops-toolkit or $OPS_TOOLKIT_CONFIG_DIR
    manager.initialize()

    interval = manager.get("monitor.refreshInterval")
    manager.set("monitor.refreshInterval", 10)
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

from ops_toolkit.core.config.backups import BackupStore
from ops_toolkit.core.config.constants import (
    BACKUP_DIR_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_MAX_BACKUPS,
)
from ops_toolkit.core.config.loaders import (
    load_yaml_file,
    merge_configs,
    resolve_config_dir,
    save_yaml_file,
)
from ops_toolkit.core.config.models import Config, get_default_config
from ops_toolkit.core.config.paths import get_nested_value, is_valid_path, set_nested_value
from ops_toolkit.core.config.validators import ValidatorLike, ValidatorRegistry
from ops_toolkit.core.exceptions import (
    ConfigLoadError,
    ConfigUninitializedError,
    ConfigValidationError,
)

logger = logging.getLogger(__name__)


class ManagerState(Enum):
    """Lifecycle state of a ConfigManager."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    MUTATING = "mutating"
    ROLLED_BACK = "rolled_back"


class ConfigManager:
    """Owns, persists and validates the active configuration tree.

    One instance is built at process start and passed to whatever needs
    configuration. Tests create as many independent instances as they
    like, each pointed at its own directory.

    Thread Safety:
        ConfigManager is NOT thread-safe. The CLI runs one command per
        process and never re-enters the manager.

    Attributes:
        config_dir: Directory holding the config file and backups.
        config_file: Path to the persisted configuration file.
        backup_dir: Directory holding backup snapshots.
        backups: Backup store protecting config_file.
        validators: Registry run after every load and mutation.

    """

    def __init__(
        self,
        config_dir: Path | str | None = None,
        *,
        config_file_name: str = CONFIG_FILE_NAME,
        defaults: dict[str, Any] | None = None,
        registry: ValidatorRegistry | None = None,
    ) -> None:
        """Initialize the manager without touching the filesystem.

        Args:
            config_dir: Configuration directory. Resolved via
                resolve_config_dir() when None.
            config_file_name: File name of the persisted config.
            defaults: Default tree to merge under the loaded file.
                Defaults to get_default_config().
            registry: Validator registry to use. A new empty one when None.

        """
        self.config_dir = resolve_config_dir(config_dir)
        self.config_file = self.config_dir / config_file_name
        self.backup_dir = self.config_dir / BACKUP_DIR_NAME
        self.backups = BackupStore(self.config_file, self.backup_dir)
        self.validators = registry if registry is not None else ValidatorRegistry()

        self._defaults = copy.deepcopy(defaults) if defaults is not None else get_default_config()
        self._active: dict[str, Any] | None = None
        self._state = ManagerState.UNINITIALIZED

    # ===== Lifecycle =====

    @property
    def state(self) -> ManagerState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_initialized(self) -> bool:
        """True once initialize() has succeeded."""
        return self._active is not None

    def initialize(self) -> None:
        """Create directories, load or create the config file, merge and validate.

        Raises:
            ConfigLoadError: If directories cannot be created or the file
                cannot be read or parsed.
            ConfigPersistError: If the initial default file cannot be written.
            ConfigValidationError: If the merged tree fails validation.

        """
        self._state = ManagerState.INITIALIZING
        self._active = None
        try:
            try:
                self.config_dir.mkdir(parents=True, exist_ok=True)
                self.backup_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ConfigLoadError(
                    f"Cannot create configuration directory {self.config_dir}: {e}"
                ) from e

            if not self.config_file.exists():
                logger.info("No config file found, writing defaults to %s", self.config_file)
                save_yaml_file(self.config_file, self._defaults)

            active = self._load_merged()
            self._validate(active, "initialize")
        except Exception:
            self._state = ManagerState.UNINITIALIZED
            raise

        self._active = active
        self._state = ManagerState.READY
        logger.info("Configuration initialized from %s", self.config_file)

    def _require_ready(self) -> dict[str, Any]:
        if self._active is None:
            raise ConfigUninitializedError(
                "Configuration not initialized. Call initialize() first."
            )
        return self._active

    # ===== Read access =====

    def get(self, key: str | None = None, default: Any = None) -> Any:
        """Get the whole configuration or the value at a dotted key.

        Args:
            key: Dot-notation path (e.g., "monitor.refreshInterval"), or None
                for the whole tree.
            default: Returned when key does not exist.

        Returns:
            A copy of the requested value; mutating it does not affect the
            stored configuration.

        Raises:
            ConfigUninitializedError: If initialize() has not succeeded.

        """
        active = self._require_ready()
        if key is None:
            return copy.deepcopy(active)

        value, found = get_nested_value(active, key)
        if not found:
            return default
        return copy.deepcopy(value)

    def typed(self) -> Config:
        """Get a typed view of the active configuration.

        Raises:
            ConfigUninitializedError: If initialize() has not succeeded.
            pydantic.ValidationError: If the tree does not fit the model.

        """
        return Config.model_validate(self._require_ready())

    # ===== Mutation =====

    def set(self, key: str, value: Any) -> None:
        """Set a value at a dotted key, persist and validate.

        Takes a backup first. If persisting or validating fails, the file is
        restored from that backup, the in-memory tree is put back exactly as
        it was, and the original error is raised.

        Args:
            key: Dot-notation path. Missing intermediate sections are created.
            value: New value (any YAML-representable value).

        Raises:
            ConfigUninitializedError: If initialize() has not succeeded.
            ConfigPersistError: If the file cannot be written.
            ConfigValidationError: If validators reject the new tree.

        """
        self._require_ready()
        if not is_valid_path(key):
            logger.warning("Ignoring set for invalid config key %r: no terminal key", key)
            return

        def apply(tree: dict[str, Any]) -> dict[str, Any]:
            set_nested_value(tree, key, value)
            return tree

        self._mutate(f"set '{key}'", apply)
        logger.info("Configuration updated: %s", key)

    def reset(self) -> None:
        """Replace the configuration with the defaults, persist and validate.

        Same backup and rollback contract as set().

        Raises:
            ConfigUninitializedError: If initialize() has not succeeded.
            ConfigPersistError: If the file cannot be written.
            ConfigValidationError: If validators reject the defaults.

        """
        self._require_ready()
        self._mutate("reset", lambda _tree: copy.deepcopy(self._defaults))
        logger.info("Configuration reset to defaults")

    def _mutate(
        self,
        operation: str,
        apply: Callable[[dict[str, Any]], dict[str, Any]],
    ) -> None:
        """Run backup, mutate, persist, validate with rollback on failure.

        Args:
            operation: Description used in log and error messages.
            apply: Receives the active tree, mutates or replaces it and returns
                the new tree.

        """
        active = self._require_ready()
        snapshot = copy.deepcopy(active)

        self._state = ManagerState.MUTATING
        backup = self.backups.create_backup()

        try:
            new_tree = apply(active)
            self._active = new_tree
            save_yaml_file(self.config_file, new_tree)
            self._validate(new_tree, operation)
        except Exception as e:
            self._rollback(snapshot, backup, operation, e)
            raise

        self._state = ManagerState.READY

    def _rollback(
        self,
        snapshot: dict[str, Any],
        backup: Path | None,
        operation: str,
        error: Exception,
    ) -> None:
        """Restore the file from the latest backup and memory from snapshot.

        An older snapshot is never restored in place of the one this mutation
        failed to take. If the file cannot be restored, the reason is appended
        to the message of error, which the caller re-raises.
        """
        self._state = ManagerState.ROLLED_BACK
        self._active = snapshot

        if backup is not None and self.backups.restore_latest():
            logger.warning("Rolled back configuration after failed %s: %s", operation, error)
        else:
            logger.error(
                "Could not restore %s after failed %s: no usable backup",
                self.config_file,
                operation,
            )
            error.args = (
                f"{error}; rollback of {self.config_file} failed: no usable backup",
                *error.args[1:],
            )

        self._state = ManagerState.READY

    def reload(self) -> None:
        """Re-read the config file and re-merge with the defaults.

        No backup is taken and nothing is rolled back: if validation fails,
        the newly loaded tree stays active and the error is raised.

        Raises:
            ConfigUninitializedError: If initialize() has not succeeded.
            ConfigLoadError: If the file cannot be read or parsed (the previous
                tree stays active).
            ConfigValidationError: If validators reject the reloaded tree.

        """
        self._require_ready()
        active = self._load_merged()
        self._active = active
        logger.debug("Reloaded configuration from %s", self.config_file)
        self._validate(active, "reload")

    # ===== Validators and backups =====

    def register_validator(self, name: str, validator: ValidatorLike) -> None:
        """Register (or replace) a named validator."""
        self.validators.register(name, validator)

    def validate(self) -> None:
        """Run all validators against the active configuration.

        Raises:
            ConfigUninitializedError: If initialize() has not succeeded.
            ConfigValidationError: If any validator fails.

        """
        self._validate(self._require_ready(), "validate")

    def create_backup(self) -> Path | None:
        """Snapshot the config file now. Returns the snapshot path or None."""
        self._require_ready()
        return self.backups.create_backup()

    def list_backups(self) -> list[Path]:
        """List backup snapshots, newest first."""
        self._require_ready()
        return self.backups.list_backups()

    def clean_old_backups(self, max_kept: int = DEFAULT_MAX_BACKUPS) -> int:
        """Delete all but the newest max_kept backups. Returns the count removed."""
        self._require_ready()
        return self.backups.prune(max_kept)

    # ===== Paths =====

    def get_config_dir(self) -> Path:
        """Get the configuration directory."""
        return self.config_dir

    def get_config_file(self) -> Path:
        """Get the persisted configuration file path."""
        return self.config_file

    def get_backup_dir(self) -> Path:
        """Get the backup snapshot directory."""
        return self.backup_dir

    # ===== Private Helpers =====

    def _load_merged(self) -> dict[str, Any]:
        """Load the config file and merge it over the defaults."""
        loaded = load_yaml_file(self.config_file)
        return merge_configs(self._defaults, loaded)

    def _validate(self, tree: dict[str, Any], operation: str) -> None:
        """Run all validators, raising one aggregated error on failure."""
        passed, errors = self.validators.run_all(tree)
        if not passed:
            raise ConfigValidationError(
                f"Configuration validation failed during {operation}: " + "; ".join(errors),
                errors,
            )
