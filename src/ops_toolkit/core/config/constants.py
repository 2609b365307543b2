"""Shared constants for configuration modules.

This module provides constants used across config submodules to avoid
duplication and circular import issues.
"""

from pathlib import Path

# Default per-user configuration directory
DEFAULT_CONFIG_DIR: Path = Path.home() / ".ops-toolkit"

# Environment variable overriding DEFAULT_CONFIG_DIR
CONFIG_DIR_ENV: str = "OPS_TOOLKIT_CONFIG_DIR"

CONFIG_FILE_NAME: str = "config.yaml"
BACKUP_DIR_NAME: str = "backups"

# Backup files are named f"{BACKUP_PREFIX}{timestamp}{BACKUP_SUFFIX}"
BACKUP_PREFIX: str = "config-backup-"
BACKUP_SUFFIX: str = ".yaml"

# Retention used by clean_old_backups() when no count is given
DEFAULT_MAX_BACKUPS: int = 10

MAX_CONFIG_SIZE: int = 1_048_576  # 1MB - protection against YAML bombs
