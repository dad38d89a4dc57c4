"""Synchronization engine for flashcard callouts to Anki."""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

from anki_link.anki import actions, note_model
from anki_link.domain.entities.summary import SyncSummary
from anki_link.domain.interfaces.anki_client import ActionResult, AnkiAction, IAnkiClient
from anki_link.domain.interfaces.document_store import IDocumentStore
from anki_link.exceptions import (
    AnkiActionError,
    ResponseShapeError,
    SyncCancelledError,
    SyncInProgressError,
)
from anki_link.obsidian.parser import parse_document
from anki_link.sync.planner import (
    ParsedDocument,
    SyncPlan,
    decks_in_use,
    plan_mutations,
    referenced_ids,
)
from anki_link.sync.rewriter import DocumentRewriter
from anki_link.sync.snapshot import fetch_snapshot
from anki_link.sync.submitter import BatchSubmitter
from anki_link.utils.logging import get_logger

if TYPE_CHECKING:
    from anki_link.config import Config

logger = get_logger(__name__)


class SyncEngine:
    """Orchestrate one-way synchronization from documents to Anki.

    A run lists and parses the documents, makes sure the decks and the note
    model exist, fetches the remote state in one request, plans the
    mutations and submits them, then writes new note ids back. Documents
    always win: remote edits to managed notes are overwritten.
    """

    def __init__(
        self,
        client: IAnkiClient,
        store: IDocumentStore,
        *,
        model_name: str = note_model.DEFAULT_MODEL_NAME,
        managed_tag: str = "ankiLink",
        default_deck: str | None = None,
        max_batch_actions: int = 500,
        dry_run: bool = False,
    ):
        """Initialize sync engine.

        Args:
            client: AnkiConnect client
            store: Source of flashcard documents
            model_name: Note type used for new notes
            managed_tag: Tag marking notes owned by this engine
            default_deck: Deck for documents without one (None skips them)
            max_batch_actions: Largest number of actions per multi request
            dry_run: Plan and report without changing Anki or documents
        """
        self.client = client
        self.store = store
        self.model_name = model_name
        self.managed_tag = managed_tag
        self.default_deck = default_deck
        self.dry_run = dry_run
        self.submitter = BatchSubmitter(
            client, model_name, managed_tag, max_actions=max_batch_actions
        )
        self.rewriter = DocumentRewriter(store)
        self._run_lock = asyncio.Lock()

    @classmethod
    def from_config(
        cls,
        config: Config,
        client: IAnkiClient,
        store: IDocumentStore,
        dry_run: bool = False,
    ) -> SyncEngine:
        return cls(
            client,
            store,
            model_name=config.model_name,
            managed_tag=config.managed_tag,
            default_deck=config.default_deck,
            max_batch_actions=config.max_batch_actions,
            dry_run=dry_run,
        )

    @property
    def running(self) -> bool:
        return self._run_lock.locked()

    async def run(self, cancel_event: asyncio.Event | None = None) -> SyncSummary:
        """Run one synchronization.

        Args:
            cancel_event: When set, the run stops at the next checkpoint
                between network round trips. Submission itself is never
                interrupted.

        Returns:
            Counts of added, modified and deleted notes

        Raises:
            SyncInProgressError: If another run of this engine is active
            SyncCancelledError: If cancelled at a checkpoint
            AnkiError: If talking to Anki fails; ids created before the
                failure are still written back
        """
        if self._run_lock.locked():
            msg = "A sync is already running"
            raise SyncInProgressError(msg, suggestion="Wait for it to finish")

        async with self._run_lock:
            start = time.monotonic()
            logger.info("sync_started", dry_run=self.dry_run)

            documents = self._parse_documents()
            self._checkpoint(cancel_event, "parsed")

            decks = decks_in_use(documents)
            await self._ensure_setup(decks)
            self._checkpoint(cancel_event, "setup")

            snapshot = await fetch_snapshot(
                self.client, referenced_ids(documents), decks, self.managed_tag
            )
            self._checkpoint(cancel_event, "snapshot")

            plan = plan_mutations(documents, snapshot, self.managed_tag)
            summary = SyncSummary(
                added=plan.added, modified=plan.modified, deleted=plan.deleted
            )

            if self.dry_run:
                logger.info("sync_dry_run", **plan.batch.counts())
            elif not plan.batch.is_empty:
                await self._submit(plan)

            logger.info(
                "sync_completed",
                duration_seconds=round(time.monotonic() - start, 3),
                added=summary.added,
                modified=summary.modified,
                deleted=summary.deleted,
                dry_run=self.dry_run,
            )
            return summary

    def _parse_documents(self) -> list[ParsedDocument]:
        documents: list[ParsedDocument] = []
        skipped = 0
        for handle in self.store.list_documents():
            deck_name = self.store.read_group_metadata(handle) or self.default_deck
            if deck_name is None:
                skipped += 1
                continue
            records = parse_document(self.store.read_lines(handle), deck_name)
            if records:
                documents.append(ParsedDocument(handle, deck_name, tuple(records)))

        logger.info(
            "documents_parsed",
            documents=len(documents),
            flashcards=sum(len(d.records) for d in documents),
            skipped_without_deck=skipped,
        )
        return documents

    def _checkpoint(self, cancel_event: asyncio.Event | None, stage: str) -> None:
        if cancel_event is not None and cancel_event.is_set():
            logger.info("sync_cancelled", stage=stage)
            msg = f"Sync cancelled after {stage}"
            raise SyncCancelledError(msg)

    async def _ensure_setup(self, decks: list[str]) -> None:
        """Create missing decks and the note model, then refresh its templates."""
        lookups = [actions.deck_names(), actions.model_names()]
        existing_decks, existing_models = [
            _name_list(action, result)
            for action, result in zip(lookups, await self.client.multi(lookups))
        ]

        setup = [actions.create_deck(deck) for deck in decks if deck not in existing_decks]
        if self.model_name not in existing_models:
            setup.append(
                actions.create_model(note_model.create_model_params(self.model_name))
            )
        setup.append(actions.update_model_templates(self.model_name, note_model.templates()))
        setup.append(actions.update_model_styling(self.model_name, note_model.CSS))

        if self.dry_run:
            logger.debug("setup_skipped_dry_run", actions=[a.action for a in setup])
            return

        for action, result in zip(setup, await self.client.multi(setup)):
            if not result.ok:
                raise AnkiActionError(action.action, str(result.error))
        logger.debug("setup_completed", actions=len(setup))

    async def _submit(self, plan: SyncPlan) -> None:
        outcome = await self.submitter.submit(plan.batch)
        written = self.rewriter.write_back(outcome.created)
        logger.info(
            "batch_submitted",
            created=len(outcome.created),
            documents_written=written,
            ok=outcome.ok,
        )
        if outcome.error is not None:
            raise outcome.error


def _name_list(action: AnkiAction, result: ActionResult) -> set[str]:
    if not result.ok:
        raise AnkiActionError(action.action, str(result.error))
    if not isinstance(result.result, list):
        msg = f"{action.action} did not return a list"
        raise ResponseShapeError(msg)
    return {str(name) for name in result.result}
