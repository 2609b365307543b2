"""Shared I/O utilities for atomic file operations.

This module provides reusable utilities for:
- Atomic file writes (temp file + os.replace pattern)
- Atomic file copies used by backup and restore
- Filesystem-safe timestamps for snapshot filenames
"""

import contextlib
import logging
import os
import shutil
from datetime import UTC, datetime
from pathlib import Path

__all__ = [
    "atomic_write",
    "atomic_copy",
    "get_timestamp",
]

logger = logging.getLogger(__name__)


def get_timestamp(dt: datetime | None = None) -> str:
    """Get a filesystem-safe UTC timestamp with microsecond precision.

    Format is ISO 8601 with "-" in place of ":" and ".", so that lexicographic
    order of the strings equals chronological order.

    Args:
        dt: Datetime to format. Defaults to now (UTC).

    Returns:
        Timestamp like "2026-10-18T09-15-02-123456Z".

    Example:
        >>> get_timestamp(datetime(2026, 1, 2, 3, 4, 5, 6, tzinfo=UTC))
        '2026-01-02T03-04-05-000006Z'

    """
    if dt is None:
        dt = datetime.now(UTC)
    return dt.strftime("%Y-%m-%dT%H-%M-%S-%fZ")


def _temp_path_for(path: Path) -> Path:
    # PID in the name prevents temp file collisions between processes
    return path.parent / f".{path.name}.{os.getpid()}.tmp"


def atomic_write(path: Path, content: str) -> None:
    """Write content to path atomically using temp file + os.replace.

    The temp file is flushed and fsynced before the rename so a caller that
    sees this function return knows the content reached the disk.

    Args:
        path: Target file path.
        content: Content to write.

    Raises:
        OSError: If write fails.

    """
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_path = _temp_path_for(path)
    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except OSError:
        with contextlib.suppress(OSError):
            if temp_path.exists():
                temp_path.unlink()
        raise


def atomic_copy(source: Path, destination: Path) -> None:
    """Copy source over destination atomically.

    Both handles are scoped to a with block, so they are closed on every exit
    path; the destination is only replaced after a complete, fsynced copy.

    Args:
        source: File to copy.
        destination: Target path (overwritten if it exists).

    Raises:
        OSError: If the source cannot be read or the destination written.

    """
    destination.parent.mkdir(parents=True, exist_ok=True)

    temp_path = _temp_path_for(destination)
    try:
        with open(source, "rb") as src, open(temp_path, "wb") as dst:
            shutil.copyfileobj(src, dst)
            dst.flush()
            os.fsync(dst.fileno())
        shutil.copystat(source, temp_path)
        os.replace(temp_path, destination)
    except OSError:
        with contextlib.suppress(OSError):
            if temp_path.exists():
                temp_path.unlink()
        raise
