"""Shared utilities for CLI commands."""

from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from anki_link.config import Config, load_config, set_config
from anki_link.exceptions import AnkiLinkError
from anki_link.utils.logging import configure_logging, get_logger

# Shared console for all commands
console = Console()


def get_config_and_logger(
    config_path: Path | None = None,
    log_level: str | None = None,
    verbose: bool = False,
    overrides: dict[str, Any] | None = None,
) -> tuple[Config, Any]:
    """Load configuration and configure logging for one command.

    Args:
        config_path: Optional path to config file
        log_level: Console log level; the configured level when None
        verbose: Show all log messages on terminal (for debugging)
        overrides: Settings given on the command line

    Returns:
        Tuple of (Config, Logger)

    Raises:
        typer.Exit: If the configuration is invalid
    """
    try:
        config = load_config(config_path, overrides=overrides)
    except AnkiLinkError as e:
        print_error(e)
        raise typer.Exit(code=1) from e
    set_config(config)

    configure_logging(
        log_level or config.log_level,
        log_dir=config.log_dir,
        verbose=verbose,
    )
    return config, get_logger("cli")


def print_error(error: AnkiLinkError) -> None:
    """Print an error and its suggestion, if any."""
    console.print(f"[bold red]Error:[/bold red] {escape(error.message)}")
    if error.suggestion:
        console.print(f"  [dim]TIP: {escape(error.suggestion)}[/dim]")
