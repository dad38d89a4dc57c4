"""Remote state fetched once at the start of a sync run."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from anki_link.anki import actions
from anki_link.anki.validation import InvalidNote, NoteValidation, validate_note_info
from anki_link.domain.interfaces.anki_client import ActionResult, AnkiAction, IAnkiClient
from anki_link.exceptions import AnkiActionError, ResponseShapeError
from anki_link.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RemoteSnapshot:
    """What Anki knows about the managed notes.

    Attributes:
        tagged_ids: Notes carrying the managed tag when the run started
        notes: Validation result for every identifier referenced locally
        deck_members: Managed notes sitting directly in each deck in use
    """

    tagged_ids: frozenset[int] = frozenset()
    notes: Mapping[int, NoteValidation] = field(default_factory=dict)
    deck_members: Mapping[str, frozenset[int]] = field(default_factory=dict)

    def lookup(self, note_id: int) -> NoteValidation:
        return self.notes.get(note_id, InvalidNote("not requested"))

    def in_deck(self, note_id: int, deck_name: str) -> bool:
        return note_id in self.deck_members.get(deck_name, frozenset())


def snapshot_actions(
    note_ids: list[int], deck_names: list[str], managed_tag: str
) -> list[AnkiAction]:
    """Build the queries of one snapshot request, in response order."""
    return [
        actions.find_notes(actions.tag_query(managed_tag)),
        actions.notes_info(note_ids),
        *(
            actions.find_notes(actions.tag_in_deck_query(managed_tag, deck))
            for deck in deck_names
        ),
    ]


def _checked(action: AnkiAction, result: ActionResult) -> object:
    if not result.ok:
        raise AnkiActionError(action.action, str(result.error))
    return result.result


def _note_ids(action: AnkiAction, result: ActionResult) -> frozenset[int]:
    value = _checked(action, result)
    if not isinstance(value, list) or not all(
        isinstance(v, int) and not isinstance(v, bool) for v in value
    ):
        msg = f"{action.action} did not return a list of note ids"
        raise ResponseShapeError(msg, context={"params": action.params})
    return frozenset(value)


def _validate_infos(
    note_ids: list[int], action: AnkiAction, result: ActionResult
) -> dict[int, NoteValidation]:
    value = _checked(action, result)
    if not isinstance(value, list) or len(value) != len(note_ids):
        got = len(value) if isinstance(value, list) else type(value).__name__
        msg = f"notesInfo returned {got} entries for {len(note_ids)} notes"
        raise ResponseShapeError(msg)

    notes: dict[int, NoteValidation] = {}
    for note_id, raw in zip(note_ids, value):
        validation = validate_note_info(raw, expected_id=note_id)
        if isinstance(validation, InvalidNote):
            logger.debug("remote_note_invalid", note_id=note_id, reason=validation.reason)
        notes[note_id] = validation
    return notes


async def fetch_snapshot(
    client: IAnkiClient,
    note_ids: Iterable[int],
    deck_names: Iterable[str],
    managed_tag: str,
) -> RemoteSnapshot:
    """Fetch tagged notes, referenced notes and deck membership in one request.

    Raises:
        AnkiActionError: If one of the queries fails
        ResponseShapeError: If a query answers with an unexpected shape
    """
    ids = list(note_ids)
    decks = list(deck_names)
    requests = snapshot_actions(ids, decks, managed_tag)
    results = await client.multi(requests)

    tagged_ids = _note_ids(requests[0], results[0])
    notes = _validate_infos(ids, requests[1], results[1])
    deck_members = {
        deck: _note_ids(request, result)
        for deck, request, result in zip(decks, requests[2:], results[2:])
    }

    logger.info(
        "remote_snapshot_fetched",
        tagged=len(tagged_ids),
        referenced=len(ids),
        decks=len(decks),
    )
    return RemoteSnapshot(tagged_ids=tagged_ids, notes=notes, deck_members=deck_members)
