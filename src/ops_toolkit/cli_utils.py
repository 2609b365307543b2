"""Shared CLI helpers: console output, exit codes and logging setup."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2

console = Console()


def _error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]Error:[/red] [red]{escape(message)}[/red]")


def _warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]Warning:[/yellow] {escape(message)}")


def _success(message: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]{escape(message)}[/green]")


def _info(message: str) -> None:
    """Print an informational message in blue."""
    console.print(f"[blue]{escape(message)}[/blue]")


def _setup_logging(verbose: bool, quiet: bool) -> None:
    """Configure root logging for a CLI invocation.

    Level is DEBUG with --verbose, WARNING with --quiet, INFO otherwise.
    --verbose takes precedence over --quiet.

    Args:
        verbose: Enable debug output.
        quiet: Only show warnings and errors.

    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
        force=True,
    )
