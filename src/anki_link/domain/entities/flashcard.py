"""Domain entity for flashcards found in documents."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NoteFields:
    """Front/back pair as stored in the ``AnkiLink Basic`` model."""

    front: str
    back: str

    def as_anki(self) -> dict[str, str]:
        """Field mapping in the shape AnkiConnect expects."""
        return {"Front": self.front, "Back": self.back}


@dataclass(frozen=True)
class FlashcardRecord:
    """One ``> [!flashcard]`` block as parsed from a document.

    Built fresh on every parse pass and never mutated. ``line_index`` points
    at the header line in the document's current line buffer and is only
    used to write a newly assigned identifier back.
    """

    identifier: int | None
    line_index: int
    title: str
    deck_name: str
    fields: NoteFields

    def __post_init__(self) -> None:
        if self.line_index < 0:
            raise ValueError("line_index cannot be negative")
        if self.identifier is not None and self.identifier < 0:
            raise ValueError("identifier must be unsigned")

    @property
    def is_new(self) -> bool:
        """Check if the flashcard has never been synced."""
        return self.identifier is None
