"""AnkiConnect client, action builders and response validation."""

from .client import AnkiClient
from .validation import InvalidNote, RemoteNote, ValidNote, validate_note_info

__all__ = [
    "AnkiClient",
    "InvalidNote",
    "RemoteNote",
    "ValidNote",
    "validate_note_info",
]
