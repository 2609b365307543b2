"""Config subcommand group for ops-toolkit CLI.

Commands for viewing and editing the persistent configuration and its
backup snapshots. Every command receives the ConfigManager built by the
top-level callback through ``ctx.obj``.
"""

import logging
from datetime import datetime
from typing import Any

import typer
import yaml
from rich.syntax import Syntax
from rich.table import Table

from ops_toolkit.cli_utils import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    _error,
    _info,
    _success,
    _warning,
    console,
)
from ops_toolkit.core.config import (
    DEFAULT_MAX_BACKUPS,
    ConfigManager,
    flatten_tree,
)
from ops_toolkit.core.config.loaders import dump_yaml
from ops_toolkit.core.exceptions import ConfigError, ConfigValidationError

logger = logging.getLogger(__name__)

_MISSING = object()

config_app = typer.Typer(
    name="config",
    help="Configuration management commands",
    no_args_is_help=True,
)


def _manager(ctx: typer.Context) -> ConfigManager:
    """Get the initialized ConfigManager from the typer context.

    Raises:
        typer.Exit: With EXIT_CONFIG_ERROR if initialization fails.

    """
    manager: ConfigManager = ctx.obj
    if not manager.is_initialized:
        try:
            manager.initialize()
        except ConfigError as e:
            _error(str(e))
            raise typer.Exit(code=EXIT_CONFIG_ERROR) from None
    return manager


def _fail(e: ConfigError) -> typer.Exit:
    """Report a ConfigError and build the matching exit."""
    _error(str(e))
    if isinstance(e, ConfigValidationError):
        for message in e.errors:
            console.print(f"  - {message}", markup=False, highlight=False)
    return typer.Exit(code=EXIT_CONFIG_ERROR)


def _parse_value(raw: str) -> Any:
    """Parse a command-line value as YAML so numbers, booleans and lists get native types."""
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def _format_value(value: Any) -> str:
    """Render a config value for display."""
    if isinstance(value, (dict, list)):
        return yaml.safe_dump(value, default_flow_style=False, sort_keys=False).rstrip("\n")
    rendered = yaml.safe_dump(value, default_flow_style=True)
    return rendered.removesuffix("\n...\n").rstrip("\n")


@config_app.command("show")
def config_show(
    ctx: typer.Context,
    flat: bool = typer.Option(
        False,
        "--flat",
        help="Show dotted keys as a table instead of YAML",
    ),
) -> None:
    """Show the active configuration."""
    manager = _manager(ctx)
    tree = manager.get()

    if flat:
        table = Table(title="Configuration")
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        for key, value in flatten_tree(tree).items():
            table.add_row(key, _format_value(value))
        console.print(table)
    else:
        console.print(Syntax(dump_yaml(tree), "yaml"))


@config_app.command("get")
def config_get(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Dotted key, e.g. monitor.refreshInterval"),
) -> None:
    """Print the value stored at KEY."""
    manager = _manager(ctx)
    value = manager.get(key, default=_MISSING)
    if value is _MISSING:
        _error(f"Key not found: {key}")
        raise typer.Exit(code=EXIT_ERROR)
    console.print(_format_value(value), markup=False, highlight=False)


@config_app.command("set")
def config_set(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Dotted key, e.g. monitor.refreshInterval"),
    value: str = typer.Argument(..., help="New value, parsed as YAML (10, true, [a, b])"),
) -> None:
    """Set KEY to VALUE, with backup and automatic rollback on failure."""
    manager = _manager(ctx)
    try:
        manager.set(key, _parse_value(value))
    except ConfigError as e:
        raise _fail(e) from None
    _success(f"Configuration updated: {key}")


@config_app.command("reset")
def config_reset(
    ctx: typer.Context,
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Do not ask for confirmation",
    ),
) -> None:
    """Reset the configuration to defaults (a backup is taken first)."""
    manager = _manager(ctx)
    if not yes and not typer.confirm("Reset configuration to defaults?"):
        _warning("Reset cancelled")
        raise typer.Exit(code=EXIT_ERROR)
    try:
        manager.reset()
    except ConfigError as e:
        raise _fail(e) from None
    _success("Configuration reset to defaults")


@config_app.command("reload")
def config_reload(ctx: typer.Context) -> None:
    """Re-read the configuration file and validate it."""
    manager = _manager(ctx)
    try:
        manager.reload()
    except ConfigError as e:
        raise _fail(e) from None
    _success(f"Configuration reloaded from {manager.get_config_file()}")


@config_app.command("validate")
def config_validate(ctx: typer.Context) -> None:
    """Run all validators against the configuration."""
    manager = _manager(ctx)
    try:
        manager.validate()
    except ConfigError as e:
        raise _fail(e) from None
    _success(f"Configuration is valid ({len(manager.validators)} validators)")


@config_app.command("backup")
def config_backup(ctx: typer.Context) -> None:
    """Take a backup snapshot of the configuration file now."""
    manager = _manager(ctx)
    path = manager.create_backup()
    if path is None:
        _error("Backup failed (see log for details)")
        raise typer.Exit(code=EXIT_ERROR)
    _success(f"Backup created: {path}")


@config_app.command("backups")
def config_backups(ctx: typer.Context) -> None:
    """List backup snapshots, newest first."""
    manager = _manager(ctx)
    backups = manager.list_backups()
    if not backups:
        _info(f"No backups in {manager.get_backup_dir()}")
        return

    table = Table(title=f"Backups in {manager.get_backup_dir()}")
    table.add_column("#", justify="right")
    table.add_column("File", style="cyan")
    table.add_column("Modified")
    table.add_column("Size", justify="right")
    for i, path in enumerate(backups, start=1):
        try:
            stat = path.stat()
            mtime = datetime.fromtimestamp(stat.st_mtime)
            modified = mtime.isoformat(timespec="seconds")
            size = f"{stat.st_size:,} B"
        except OSError:
            modified, size = "unknown", "?"
        table.add_row(str(i), path.name, modified, size)
    console.print(table)


@config_app.command("clean-backups")
def config_clean_backups(
    ctx: typer.Context,
    keep: int = typer.Option(
        DEFAULT_MAX_BACKUPS,
        "--keep",
        "-k",
        min=0,
        help="Number of newest backups to keep",
    ),
) -> None:
    """Delete all but the newest backups."""
    manager = _manager(ctx)
    removed = manager.clean_old_backups(keep)
    _success(f"Removed {removed} backup(s), kept at most {keep}")


@config_app.command("path")
def config_path(ctx: typer.Context) -> None:
    """Show configuration file locations."""
    manager: ConfigManager = ctx.obj
    console.print(f"Config dir:  {manager.get_config_dir()}", markup=False, highlight=False)
    console.print(f"Config file: {manager.get_config_file()}", markup=False, highlight=False)
    console.print(f"Backup dir:  {manager.get_backup_dir()}", markup=False, highlight=False)
