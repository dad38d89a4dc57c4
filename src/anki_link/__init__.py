"""Sync Obsidian flashcard callouts with Anki through AnkiConnect."""

__version__ = "0.3.0"
