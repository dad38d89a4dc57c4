"""Test fixtures package."""

from .fake_anki import FakeAnkiClient, FakeAnkiConnect
from .memory_store import InMemoryDocumentStore

__all__ = [
    "FakeAnkiClient",
    "FakeAnkiConnect",
    "InMemoryDocumentStore",
]
