"""Sync and connectivity commands."""

from __future__ import annotations

import asyncio
import contextlib
import signal
import time
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from anki_link.anki.client import AnkiClient
from anki_link.config import Config
from anki_link.domain.entities.summary import SyncSummary
from anki_link.exceptions import AnkiLinkError
from anki_link.obsidian.vault import VaultDocumentStore
from anki_link.sync.engine import SyncEngine

from .shared import console, get_config_and_logger


def build_client(config: Config) -> AnkiClient:
    return AnkiClient(
        url=config.anki_connect_url,
        version=config.anki_connect_version,
        timeout=config.request_timeout,
    )


async def run_sync(config: Config, dry_run: bool = False) -> SyncSummary:
    """Run one sync over the configured vault.

    The first Ctrl-C asks the engine to stop at its next checkpoint instead
    of interrupting a submission in flight.
    """
    cancel_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    with contextlib.suppress(NotImplementedError, RuntimeError):
        loop.add_signal_handler(signal.SIGINT, cancel_event.set)

    store = VaultDocumentStore(config.vault_path, deck_key=config.deck_key)
    try:
        async with build_client(config) as client:
            engine = SyncEngine.from_config(config, client, store, dry_run=dry_run)
            return await engine.run(cancel_event)
    finally:
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.remove_signal_handler(signal.SIGINT)


async def fetch_status(config: Config) -> tuple[int, list[str], list[str]]:
    """Return the AnkiConnect version, deck names and model names."""
    async with build_client(config) as client:
        version = await client.version_number()
        decks = await client.invoke("deckNames")
        models = await client.invoke("modelNames")
    return version, sorted(decks or []), sorted(models or [])


def register(app: typer.Typer) -> None:
    """Register sync commands on the given Typer app."""

    @app.command()
    def sync(
        config_path: Annotated[
            Path | None,
            typer.Option("--config", help="Path to config.yaml"),
        ] = None,
        vault: Annotated[
            Path | None,
            typer.Option("--vault", help="Vault directory (overrides config)"),
        ] = None,
        dry_run: Annotated[
            bool,
            typer.Option("--dry-run", help="Preview changes without applying"),
        ] = False,
        log_level: Annotated[
            str | None,
            typer.Option("--log-level", help="Log level (DEBUG, INFO, WARN, ERROR)"),
        ] = None,
        verbose: Annotated[
            bool,
            typer.Option(
                "--verbose",
                "-v",
                help="Show all log messages on terminal (for debugging)",
            ),
        ] = False,
    ) -> None:
        """Synchronize flashcard callouts in the vault to Anki."""
        start_time = time.time()
        config, logger = get_config_and_logger(
            config_path,
            log_level,
            verbose=verbose,
            overrides={"vault_path": vault},
        )
        logger.info(
            "cli_command_started",
            command="sync",
            dry_run=dry_run,
            vault_path=str(config.vault_path),
        )

        try:
            config.validate_config()
            summary = asyncio.run(run_sync(config, dry_run=dry_run))
        except AnkiLinkError as e:
            logger.error(
                "sync_failed",
                error=e.message,
                error_type=type(e).__name__,
                duration=round(time.time() - start_time, 2),
            )
            if e.suggestion:
                console.print(f"  [dim]TIP: {escape(e.suggestion)}[/dim]")
            raise typer.Exit(code=1) from e

        prefix = "Dry run, nothing changed." if dry_run else "Synced flashcards."
        console.print(f"[bold green]{prefix}[/bold green] {summary.describe()}")

    @app.command()
    def check(
        config_path: Annotated[
            Path | None,
            typer.Option("--config", help="Path to config.yaml"),
        ] = None,
    ) -> None:
        """Check that AnkiConnect is reachable."""
        config, logger = get_config_and_logger(config_path)

        try:
            version, decks, models = asyncio.run(fetch_status(config))
        except AnkiLinkError as e:
            logger.error("check_failed", error=e.message, url=config.anki_connect_url)
            console.print(f"[red]FAIL[/red] AnkiConnect at {config.anki_connect_url}")
            if e.suggestion:
                console.print(f"  [dim]TIP: {escape(e.suggestion)}[/dim]")
            raise typer.Exit(code=1) from e

        table = Table(title="AnkiConnect")
        table.add_column("Check", style="cyan")
        table.add_column("Result")
        table.add_row("URL", config.anki_connect_url)
        table.add_row("API version", str(version))
        table.add_row("Decks", str(len(decks)))
        model_state = "present" if config.model_name in models else "created on first sync"
        table.add_row(f"Model {config.model_name}", model_state)
        console.print(table)

        if version < config.anki_connect_version:
            console.print(
                f"[yellow]WARN[/yellow] AnkiConnect reports version {version}, "
                f"expected {config.anki_connect_version}"
            )
        console.print("[green]PASS[/green] AnkiConnect is reachable")
