"""Decide which mutations bring Anki in line with the documents."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from anki_link.anki.validation import InvalidNote
from anki_link.domain.entities.flashcard import FlashcardRecord
from anki_link.domain.interfaces.document_store import DocumentHandle
from anki_link.sync.batch import MutationBatch
from anki_link.sync.snapshot import RemoteSnapshot
from anki_link.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ParsedDocument:
    """Flashcards of one document together with its resolved deck."""

    handle: DocumentHandle
    deck_name: str
    records: tuple[FlashcardRecord, ...]


@dataclass(frozen=True)
class SyncPlan:
    batch: MutationBatch
    modified: int
    seen_ids: frozenset[int]

    @property
    def added(self) -> int:
        return len(self.batch.create)

    @property
    def deleted(self) -> int:
        return len(self.batch.delete)


def referenced_ids(documents: Iterable[ParsedDocument]) -> list[int]:
    """Distinct identifiers found in the documents, in first-seen order."""
    ids: dict[int, None] = {}
    for document in documents:
        for record in document.records:
            if record.identifier is not None:
                ids.setdefault(record.identifier, None)
    return list(ids)


def decks_in_use(documents: Iterable[ParsedDocument]) -> list[str]:
    decks: dict[str, None] = {}
    for document in documents:
        if document.records:
            decks.setdefault(document.deck_name, None)
    return list(decks)


def plan_mutations(
    documents: Sequence[ParsedDocument],
    snapshot: RemoteSnapshot,
    managed_tag: str,
) -> SyncPlan:
    """Stage the mutations for one run.

    Records are visited in document order:

    - no identifier, or one already used earlier in this run: create
    - identifier unknown to Anki (deleted upstream or malformed): create
    - known note without the managed tag: add the tag and leave it otherwise
      untouched until the next run
    - known tagged note: update fields and move decks where they differ

    Managed notes that no record referenced are deleted.
    """
    batch = MutationBatch()
    modified = 0
    seen: set[int] = set()

    for document in documents:
        for record in document.records:
            note_id = record.identifier
            if note_id is None:
                batch = batch.with_create(document.handle, record)
                continue

            if note_id in seen:
                logger.warning(
                    "duplicate_flashcard_identifier",
                    note_id=note_id,
                    document=str(document.handle),
                    line=record.line_index,
                )
                batch = batch.with_create(document.handle, record)
                continue
            seen.add(note_id)

            validation = snapshot.lookup(note_id)
            if isinstance(validation, InvalidNote):
                logger.info(
                    "remote_note_missing",
                    note_id=note_id,
                    reason=validation.reason,
                    document=str(document.handle),
                )
                batch = batch.with_create(document.handle, record)
                continue

            note = validation.note
            if not note.has_tag(managed_tag):
                logger.debug("remote_note_adopted", note_id=note_id)
                batch = batch.with_tag(note_id)
                continue

            changed = False
            if note.note_fields != record.fields:
                batch = batch.with_field_update(note_id, record.fields)
                changed = True
            if not snapshot.in_deck(note_id, record.deck_name):
                if note.cards:
                    batch = batch.with_deck_move(note_id, tuple(note.cards), record.deck_name)
                    changed = True
                else:
                    logger.warning("remote_note_without_cards", note_id=note_id)
            if changed:
                modified += 1

    orphaned = tuple(sorted(snapshot.tagged_ids - seen))
    if orphaned:
        batch = batch.with_deletes(orphaned)

    logger.info("mutations_planned", modified=modified, **batch.counts())
    return SyncPlan(batch=batch, modified=modified, seen_ids=frozenset(seen))
