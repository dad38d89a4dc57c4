"""Mutations staged during planning and submitted together."""

from __future__ import annotations

from dataclasses import dataclass, replace

from anki_link.domain.entities.flashcard import FlashcardRecord, NoteFields
from anki_link.domain.interfaces.document_store import DocumentHandle


@dataclass(frozen=True)
class PendingCreate:
    """A record that needs a new note, with the document it came from."""

    handle: DocumentHandle
    record: FlashcardRecord


@dataclass(frozen=True)
class FieldUpdate:
    note_id: int
    fields: NoteFields


@dataclass(frozen=True)
class DeckMove:
    note_id: int
    card_ids: tuple[int, ...]
    deck_name: str


@dataclass(frozen=True)
class MutationBatch:
    """Immutable set of staged mutations.

    Each ``with_*`` method returns a new batch; the planner threads one
    batch value through the whole pass and hands it to the submitter.
    """

    create: tuple[PendingCreate, ...] = ()
    update_fields: tuple[FieldUpdate, ...] = ()
    change_deck: tuple[DeckMove, ...] = ()
    add_tag: tuple[int, ...] = ()
    delete: tuple[int, ...] = ()

    def with_create(self, handle: DocumentHandle, record: FlashcardRecord) -> MutationBatch:
        return replace(self, create=(*self.create, PendingCreate(handle, record)))

    def with_field_update(self, note_id: int, fields: NoteFields) -> MutationBatch:
        return replace(
            self, update_fields=(*self.update_fields, FieldUpdate(note_id, fields))
        )

    def with_deck_move(
        self, note_id: int, card_ids: tuple[int, ...], deck_name: str
    ) -> MutationBatch:
        return replace(
            self, change_deck=(*self.change_deck, DeckMove(note_id, card_ids, deck_name))
        )

    def with_tag(self, note_id: int) -> MutationBatch:
        return replace(self, add_tag=(*self.add_tag, note_id))

    def with_deletes(self, note_ids: tuple[int, ...]) -> MutationBatch:
        return replace(self, delete=(*self.delete, *note_ids))

    @property
    def is_empty(self) -> bool:
        return not (
            self.create
            or self.update_fields
            or self.change_deck
            or self.add_tag
            or self.delete
        )

    def counts(self) -> dict[str, int]:
        """Number of staged mutations per kind, for logging."""
        return {
            "create": len(self.create),
            "update_fields": len(self.update_fields),
            "change_deck": len(self.change_deck),
            "add_tag": len(self.add_tag),
            "delete": len(self.delete),
        }
