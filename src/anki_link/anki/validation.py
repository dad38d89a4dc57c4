"""Structural validation of ``notesInfo`` entries.

AnkiConnect answers ``notesInfo`` for a deleted note with an empty object
instead of an error, so every entry is checked before the sync trusts it.
The result is a sum type: either a :class:`ValidNote` or an
:class:`InvalidNote` carrying the reason.
"""

from dataclasses import dataclass
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from anki_link.domain.entities.flashcard import NoteFields


class FieldValue(BaseModel):
    model_config = ConfigDict(extra="allow")

    value: str
    order: int | None = None


class RemoteFields(BaseModel):
    model_config = ConfigDict(extra="allow")

    Front: FieldValue
    Back: FieldValue


class RemoteNote(BaseModel):
    """Validated note data as returned by ``notesInfo``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    note_id: StrictInt = Field(alias="noteId", ge=0)
    model_name: str | None = Field(default=None, alias="modelName")
    tags: list[str] = Field(default_factory=list)
    cards: list[int] = Field(default_factory=list)
    fields: RemoteFields

    @property
    def note_fields(self) -> NoteFields:
        return NoteFields(front=self.fields.Front.value, back=self.fields.Back.value)

    def has_tag(self, tag: str) -> bool:
        """Anki tags are case-insensitive."""
        wanted = tag.casefold()
        return any(t.casefold() == wanted for t in self.tags)


@dataclass(frozen=True)
class ValidNote:
    note: RemoteNote


@dataclass(frozen=True)
class InvalidNote:
    reason: str


NoteValidation: TypeAlias = ValidNote | InvalidNote


def validate_note_info(raw: Any, expected_id: int | None = None) -> NoteValidation:
    """Validate one ``notesInfo`` entry.

    Args:
        raw: Entry as decoded from JSON
        expected_id: Note id the entry was requested for, if known

    Returns:
        ValidNote, or InvalidNote when the entry is missing, empty or malformed
    """
    if not isinstance(raw, dict):
        return InvalidNote(f"expected an object, got {type(raw).__name__}")
    if not raw:
        return InvalidNote("empty object (note deleted)")
    try:
        note = RemoteNote.model_validate(raw)
    except ValidationError as e:
        problems = ", ".join(
            ".".join(str(part) for part in err["loc"]) for err in e.errors()
        )
        return InvalidNote(f"invalid fields: {problems}")
    if expected_id is not None and note.note_id != expected_id:
        return InvalidNote(f"note id {note.note_id} does not match {expected_id}")
    return ValidNote(note)
