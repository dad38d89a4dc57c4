"""Domain layer: flashcard entities and the capabilities the sync consumes."""

from .entities.flashcard import FlashcardRecord, NoteFields
from .entities.summary import SyncSummary
from .interfaces.anki_client import ActionResult, AnkiAction, IAnkiClient
from .interfaces.document_store import DocumentHandle, IDocumentStore

__all__ = [
    "ActionResult",
    "AnkiAction",
    "DocumentHandle",
    "FlashcardRecord",
    "IAnkiClient",
    "IDocumentStore",
    "NoteFields",
    "SyncSummary",
]
