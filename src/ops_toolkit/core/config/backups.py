"""Timestamped backup snapshots of the persisted configuration file.

Snapshots live in a dedicated directory and are named
``config-backup-<timestamp>.yaml``. The timestamp format sorts
lexicographically in creation order, which is the only ordering the
store relies on.
"""

import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path

from ops_toolkit.core.config.constants import BACKUP_PREFIX, BACKUP_SUFFIX
from ops_toolkit.core.io import atomic_copy, get_timestamp

logger = logging.getLogger(__name__)


class BackupStore:
    """Durable undo log for configuration mutations.

    Backups are best-effort: a failed snapshot is logged and reported as
    None, never raised. Restores report failure as False.

    Attributes:
        config_file: The persisted configuration file being protected.
        backup_dir: Directory holding the snapshots.

    """

    def __init__(self, config_file: Path, backup_dir: Path) -> None:
        """Initialize the store.

        Args:
            config_file: Path to the persisted configuration file.
            backup_dir: Directory for snapshot files (created on demand).

        """
        self.config_file = config_file
        self.backup_dir = backup_dir
        self._last_stamp: datetime | None = None

    def _next_backup_path(self) -> Path:
        """Get a snapshot path whose name sorts after every earlier one."""
        stamp = datetime.now(UTC)
        if self._last_stamp is not None and stamp <= self._last_stamp:
            stamp = self._last_stamp + timedelta(microseconds=1)

        path = self.backup_dir / f"{BACKUP_PREFIX}{get_timestamp(stamp)}{BACKUP_SUFFIX}"
        while path.exists():
            stamp += timedelta(microseconds=1)
            path = self.backup_dir / f"{BACKUP_PREFIX}{get_timestamp(stamp)}{BACKUP_SUFFIX}"

        self._last_stamp = stamp
        return path

    def create_backup(self) -> Path | None:
        """Copy the current config file into the backup directory.

        Returns:
            Path of the new snapshot, or None if there was no file to back up
            or the copy failed.

        """
        if not self.config_file.exists():
            logger.debug("No config file at %s, skipping backup", self.config_file)
            return None

        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            backup_path = self._next_backup_path()
            atomic_copy(self.config_file, backup_path)
        except OSError as e:
            logger.warning(
                "Backup of %s failed: %s. Continuing without backup.", self.config_file, e
            )
            return None

        logger.debug("Created config backup %s", backup_path)
        return backup_path

    def list_backups(self) -> list[Path]:
        """List snapshot files, newest first.

        Returns:
            Snapshot paths sorted by name, then modification time, descending.

        """
        if not self.backup_dir.is_dir():
            return []

        backups = [
            p
            for p in self.backup_dir.iterdir()
            if p.is_file() and p.name.startswith(BACKUP_PREFIX) and p.name.endswith(BACKUP_SUFFIX)
        ]

        def sort_key(path: Path) -> tuple[str, float]:
            try:
                mtime = path.stat().st_mtime
            except OSError:
                mtime = 0.0
            return path.name, mtime

        return sorted(backups, key=sort_key, reverse=True)

    def latest_backup(self) -> Path | None:
        """Get the most recent snapshot, or None if there are none."""
        backups = self.list_backups()
        return backups[0] if backups else None

    def restore_latest(self) -> bool:
        """Copy the latest snapshot over the config file.

        Returns:
            True if the config file was restored, False if no snapshot exists
            or the copy failed.

        """
        latest = self.latest_backup()
        if latest is None:
            logger.warning("No backup available to restore %s", self.config_file)
            return False

        try:
            atomic_copy(latest, self.config_file)
        except OSError as e:
            logger.error("Failed to restore %s from %s: %s", self.config_file, latest, e)
            return False

        logger.info("Restored %s from backup %s", self.config_file, latest.name)
        return True

    def prune(self, max_kept: int) -> int:
        """Delete all but the newest max_kept snapshots.

        Args:
            max_kept: Number of snapshots to keep (>= 0).

        Returns:
            Number of snapshots removed.

        Raises:
            ValueError: If max_kept is negative.

        """
        if max_kept < 0:
            raise ValueError(f"max_kept must be >= 0, got {max_kept}")

        removed = 0
        for path in self.list_backups()[max_kept:]:
            try:
                path.unlink()
                removed += 1
            except OSError as e:
                logger.warning("Failed to delete old backup %s: %s", path, e)

        if removed:
            logger.info("Removed %d old config backup(s), kept %d", removed, max_kept)
        return removed
