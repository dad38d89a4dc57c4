"""Domain entities package."""

from .flashcard import FlashcardRecord, NoteFields
from .summary import SyncSummary

__all__ = [
    "FlashcardRecord",
    "NoteFields",
    "SyncSummary",
]
