"""Typer CLI entry point for ops-toolkit.

This module only parses global options and builds the ConfigManager that
subcommands receive through the typer context. No business logic here.
"""

import logging
from pathlib import Path

import typer

from ops_toolkit import __version__
from ops_toolkit.cli_utils import _setup_logging, _warning, console
from ops_toolkit.commands.config import config_app
from ops_toolkit.core.config import ConfigManager, default_validators

logger = logging.getLogger(__name__)


app = typer.Typer(
    name="ops-toolkit",
    help="Command-line operations toolkit",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"ops-toolkit {__version__}")
        raise typer.Exit()


def build_manager(config_dir: Path | None = None) -> ConfigManager:
    """Create the process-wide ConfigManager with the standard validators.

    Args:
        config_dir: Explicit configuration directory, or None to resolve it
            from OPS_TOOLKIT_CONFIG_DIR / ~/.ops-toolkit.

    Returns:
        Uninitialized ConfigManager.

    """
    manager = ConfigManager(config_dir)
    for name, validator in default_validators():
        manager.register_validator(name, validator)
    return manager


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug output",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only show warnings and errors",
    ),
    config_dir: Path | None = typer.Option(
        None,
        "--config-dir",
        help="Configuration directory (default: $OPS_TOOLKIT_CONFIG_DIR or ~/.ops-toolkit)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Command-line operations toolkit."""
    _setup_logging(verbose=verbose, quiet=quiet)
    if verbose and quiet:
        _warning("Both --verbose and --quiet given; using --verbose")

    ctx.obj = build_manager(config_dir)
    logger.debug("Using configuration directory %s", ctx.obj.get_config_dir())


app.add_typer(config_app, name="config")


if __name__ == "__main__":
    app()
