"""Tests for turning a batch into AnkiConnect requests."""

import pytest

from anki_link.domain.entities.flashcard import FlashcardRecord, NoteFields
from anki_link.domain.interfaces.anki_client import ActionResult
from anki_link.exceptions import AnkiConnectError, ResponseShapeError
from anki_link.sync.batch import MutationBatch
from anki_link.sync.submitter import BatchSubmitter, build_actions


def new_record(title: str, line: int = 0) -> FlashcardRecord:
    return FlashcardRecord(None, line, title, "Default", NoteFields(title, ""))


def full_batch() -> MutationBatch:
    return (
        MutationBatch()
        .with_deletes((9,))
        .with_tag(7)
        .with_deck_move(5, (50,), "Other")
        .with_deck_move(6, (60, 61), "Other")
        .with_field_update(4, NoteFields("F", "B"))
        .with_create("a.md", new_record("New"))
    )


class StubClient:
    """Answers multi requests from a queue of canned results."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def invoke(self, action, params=None):
        raise NotImplementedError

    async def multi(self, actions):
        self.calls.append([a.action for a in actions])
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class TestBuildActions:
    def test_order_and_grouping(self) -> None:
        """Creates first, then updates, one move per deck, tags, deletes."""
        planned = build_actions(full_batch(), "AnkiLink Basic", "ankiLink")

        assert [p.action.action for p in planned] == [
            "addNote",
            "updateNoteFields",
            "changeDeck",
            "addTags",
            "deleteNotes",
        ]
        assert planned[0].create is not None
        note = planned[0].action.params["note"]
        assert note["tags"] == ["ankiLink"]
        assert note["modelName"] == "AnkiLink Basic"
        assert planned[2].action.params == {"cards": [50, 60, 61], "deck": "Other"}
        assert planned[3].action.params == {"notes": [7], "tags": "ankiLink"}

    def test_empty_batch(self) -> None:
        assert build_actions(MutationBatch(), "M", "t") == []


class TestBatchSubmitter:
    @pytest.mark.asyncio
    async def test_created_ids_matched_by_position(self) -> None:
        batch = MutationBatch().with_create("a.md", new_record("A")).with_create(
            "a.md", new_record("B", line=3)
        )
        client = StubClient([ActionResult(None, 100), ActionResult(None, 101)])

        outcome = await BatchSubmitter(client, "M", "t").submit(batch)

        assert outcome.ok
        assert [(c.pending.record.title, c.note_id) for c in outcome.created] == [
            ("A", 100),
            ("B", 101),
        ]

    @pytest.mark.asyncio
    async def test_non_integer_id_is_shape_error(self) -> None:
        batch = MutationBatch().with_create("a.md", new_record("A"))
        client = StubClient([ActionResult(None, None)])

        outcome = await BatchSubmitter(client, "M", "t").submit(batch)

        assert isinstance(outcome.error, ResponseShapeError)
        assert outcome.created == ()

    @pytest.mark.asyncio
    async def test_count_mismatch_is_shape_error(self) -> None:
        batch = MutationBatch().with_deletes((1,)).with_tag(2)
        client = StubClient([ActionResult(None, None)])

        outcome = await BatchSubmitter(client, "M", "t").submit(batch)

        assert isinstance(outcome.error, ResponseShapeError)

    @pytest.mark.asyncio
    async def test_transport_error_keeps_earlier_chunks(self) -> None:
        batch = MutationBatch().with_create("a.md", new_record("A")).with_create(
            "a.md", new_record("B", line=2)
        )
        client = StubClient([ActionResult(None, 100)], AnkiConnectError("down"))

        outcome = await BatchSubmitter(client, "M", "t", max_actions=1).submit(batch)

        assert isinstance(outcome.error, AnkiConnectError)
        assert [c.note_id for c in outcome.created] == [100]
        assert client.calls == [["addNote"], ["addNote"]]

    def test_max_actions_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            BatchSubmitter(StubClient(), "M", "t", max_actions=0)
