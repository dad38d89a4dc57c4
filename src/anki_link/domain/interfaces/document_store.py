"""Interface for the storage that holds flashcard documents."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable, Sequence
from typing import TypeAlias

DocumentHandle: TypeAlias = Hashable


class IDocumentStore(ABC):
    """Enumerates documents and reads/writes their lines and metadata."""

    @abstractmethod
    def list_documents(self) -> Sequence[DocumentHandle]:
        """Return every document that may contain flashcards, in a stable order."""

    @abstractmethod
    def read_lines(self, handle: DocumentHandle) -> list[str]:
        """Return the document text split into lines."""

    @abstractmethod
    def write_lines(self, handle: DocumentHandle, lines: Sequence[str]) -> None:
        """Replace the document text with ``lines``."""

    @abstractmethod
    def read_group_metadata(self, handle: DocumentHandle) -> str | None:
        """Return the trimmed deck name from metadata, or None when absent/blank."""
