"""Builders for the AnkiConnect actions used by the sync.

Each builder returns an :class:`AnkiAction` so the same value can be sent on
its own with ``invoke`` or grouped into a ``multi`` request.
"""

from collections.abc import Iterable
from typing import Any

from anki_link.domain.interfaces.anki_client import AnkiAction


def escape_search_text(value: str) -> str:
    """Escape ``\\``, ``"``, ``*`` and ``_`` so Anki matches ``value`` literally."""
    for char in ("\\", '"', "*", "_"):
        value = value.replace(char, "\\" + char)
    return value


def quote_search_term(value: str) -> str:
    """Quote a value for an Anki search query."""
    return f'"{escape_search_text(value)}"'


def tag_query(tag: str) -> str:
    return f"tag:{tag}"


def tag_in_deck_query(tag: str, deck_name: str) -> str:
    """Notes carrying ``tag`` whose cards sit directly in ``deck_name``.

    ``deck:`` also matches subdecks, so those are excluded explicitly. The
    trailing ``::*`` of the exclusion is the only wildcard left unescaped.
    """
    literal = escape_search_text(deck_name)
    return f'tag:{tag} deck:"{literal}" -deck:"{literal}::*"'


def deck_names() -> AnkiAction:
    return AnkiAction("deckNames")


def create_deck(deck: str) -> AnkiAction:
    return AnkiAction("createDeck", {"deck": deck})


def model_names() -> AnkiAction:
    return AnkiAction("modelNames")


def create_model(model: dict[str, Any]) -> AnkiAction:
    return AnkiAction("createModel", model)


def update_model_templates(
    model_name: str, templates: dict[str, dict[str, str]]
) -> AnkiAction:
    return AnkiAction(
        "updateModelTemplates", {"model": {"name": model_name, "templates": templates}}
    )


def update_model_styling(model_name: str, css: str) -> AnkiAction:
    return AnkiAction("updateModelStyling", {"model": {"name": model_name, "css": css}})


def add_note(
    deck_name: str,
    model_name: str,
    fields: dict[str, str],
    tags: list[str],
) -> AnkiAction:
    note = {
        "deckName": deck_name,
        "modelName": model_name,
        "fields": fields,
        "tags": tags,
        # Identical fronts in different documents are legitimate flashcards
        "options": {"allowDuplicate": True},
    }
    return AnkiAction("addNote", {"note": note})


def notes_info(note_ids: Iterable[int]) -> AnkiAction:
    return AnkiAction("notesInfo", {"notes": list(note_ids)})


def update_note_fields(note_id: int, fields: dict[str, str]) -> AnkiAction:
    return AnkiAction("updateNoteFields", {"note": {"id": note_id, "fields": fields}})


def find_notes(query: str) -> AnkiAction:
    return AnkiAction("findNotes", {"query": query})


def add_tags(note_ids: Iterable[int], tags: str) -> AnkiAction:
    return AnkiAction("addTags", {"notes": list(note_ids), "tags": tags})


def change_deck(card_ids: Iterable[int], deck: str) -> AnkiAction:
    return AnkiAction("changeDeck", {"cards": list(card_ids), "deck": deck})


def delete_notes(note_ids: Iterable[int]) -> AnkiAction:
    return AnkiAction("deleteNotes", {"notes": list(note_ids)})


def version() -> AnkiAction:
    return AnkiAction("version")
