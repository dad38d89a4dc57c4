"""Domain interfaces package."""

from .anki_client import ActionResult, AnkiAction, IAnkiClient
from .document_store import DocumentHandle, IDocumentStore

__all__ = [
    "ActionResult",
    "AnkiAction",
    "DocumentHandle",
    "IAnkiClient",
    "IDocumentStore",
]
