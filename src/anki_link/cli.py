"""Command-line interface for anki-link."""

from __future__ import annotations

import typer

from .cli_commands import sync_commands, vault_commands

app = typer.Typer(
    name="anki-link",
    help="Sync Obsidian flashcard callouts to Anki.",
    no_args_is_help=True,
)

sync_commands.register(app)
vault_commands.register(app)


def cli() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli()
