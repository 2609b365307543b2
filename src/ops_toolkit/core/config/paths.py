"""Dot-notation access into nested configuration trees.

Paths address nested mappings with "." as separator, e.g.
"monitor.refreshInterval". Reads never fail on a missing key; writes
create whatever intermediate mappings they need.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)

SEPARATOR = "."


def _split_path(path: str) -> list[str] | None:
    """Split a dotted path, returning None if it is empty or has empty segments."""
    if not path:
        return None
    keys = path.split(SEPARATOR)
    if any(not key for key in keys):
        return None
    return keys


def is_valid_path(path: str) -> bool:
    """Check that path is non-empty and has no empty segments ("a..b")."""
    return _split_path(path) is not None


def get_nested_value(d: dict[str, Any], path: str) -> tuple[Any, bool]:
    """Get value at dot-notation path from nested dict.

    Args:
        d: Dictionary to search.
        path: Dot-notation path (e.g., "a.b.c").

    Returns:
        Tuple of (value, found). If path not found, returns (None, False).

    """
    keys = _split_path(path)
    if keys is None:
        return None, False

    current: Any = d
    for key in keys:
        if not isinstance(current, dict):
            return None, False
        if key not in current:
            return None, False
        current = current[key]
    return current, True


def get_path(d: dict[str, Any], path: str, default: Any = None) -> Any:
    """Get value at dot-notation path, or default when it does not exist."""
    value, found = get_nested_value(d, path)
    return value if found else default


def set_nested_value(d: dict[str, Any], path: str, value: Any) -> bool:
    """Set value at dot-notation path in nested dict, creating intermediate dicts.

    The terminal key is overwritten unconditionally, including type changes.
    A non-dict intermediate value is replaced by a new dict.

    Args:
        d: Dictionary to modify in place.
        path: Dot-notation path (e.g., "a.b.c").
        value: Value to set.

    Returns:
        True if the value was assigned, False if the path was rejected
        (empty, or containing an empty segment).

    """
    keys = _split_path(path)
    if keys is None:
        logger.warning("Ignoring set for invalid config path %r: no terminal key", path)
        return False

    current = d
    for i, key in enumerate(keys[:-1]):
        existing = current.get(key)
        if not isinstance(existing, dict):
            if key in current:
                logger.warning(
                    "Replacing %s value at '%s' with a mapping to set '%s'",
                    type(existing).__name__,
                    SEPARATOR.join(keys[: i + 1]),
                    path,
                )
            current[key] = {}
        current = current[key]

    current[keys[-1]] = value
    return True


def flatten_tree(tree: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """List every leaf of tree under its dotted key.

    Empty mappings are leaves, so the listing can be turned back into the
    same tree with set_nested_value.

    Args:
        tree: Configuration tree.
        prefix: Dotted key of tree within the full configuration.

    Returns:
        Mapping of dotted key to leaf value, in tree order.

    Example:
        >>> flatten_tree({"monitor": {"refreshInterval": 5000}, "ui": {}})
        {'monitor.refreshInterval': 5000, 'ui': {}}

    """
    flat: dict[str, Any] = {}
    for key, value in tree.items():
        dotted = f"{prefix}{SEPARATOR}{key}" if prefix else str(key)
        if isinstance(value, dict) and value:
            flat.update(flatten_tree(value, dotted))
        else:
            flat[dotted] = value
    return flat
