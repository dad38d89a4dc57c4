"""Commands that write flashcards into notes."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from anki_link.config import load_config
from anki_link.exceptions import ConfigurationError
from anki_link.obsidian import authoring

from .shared import console


def register(app: typer.Typer) -> None:
    """Register vault commands on the given Typer app."""

    @app.command(name="add-flashcard")
    def add_flashcard(
        file: Annotated[Path, typer.Argument(help="Markdown note to append to")],
        front: Annotated[str, typer.Option("--front", help="Flashcard title")],
        back: Annotated[
            str,
            typer.Option("--back", help="Flashcard body (Markdown, may span lines)"),
        ] = "",
    ) -> None:
        """Append a flashcard callout to a note."""
        try:
            authoring.append_flashcard(file, front, back)
        except ValueError as e:
            console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1) from e
        console.print(f"Added flashcard to [cyan]{escape(str(file))}[/cyan]")

    @app.command(name="benchmark-notes")
    def benchmark_notes(
        notes: Annotated[
            int, typer.Option("--notes", min=1, help="Number of notes to generate")
        ] = authoring.BENCHMARK_NOTES,
        cards: Annotated[
            int, typer.Option("--cards", min=1, help="Flashcards per note")
        ] = authoring.BENCHMARK_CARDS_PER_NOTE,
        target: Annotated[
            Path,
            typer.Option("--target", help="Output folder, relative to the vault"),
        ] = Path(authoring.BENCHMARK_TARGET),
        deck: Annotated[
            str, typer.Option("--deck", help="Value for the 'anki deck' front matter key")
        ] = authoring.BENCHMARK_DECK,
        config_path: Annotated[
            Path | None,
            typer.Option("--config", help="Path to config.yaml"),
        ] = None,
    ) -> None:
        """Generate demo notes with flashcards for load testing."""
        try:
            vault = load_config(config_path).vault_path
        except ConfigurationError as e:
            console.print(f"[bold red]Error:[/bold red] {escape(e.message)}")
            raise typer.Exit(code=1) from e

        output_dir = vault / target
        authoring.write_benchmark_notes(output_dir, notes, cards, deck)
        console.print(f"Generated {notes} notes with {notes * cards} flashcards.")
        console.print(f"Output directory: {escape(str(output_dir.resolve()))}")
