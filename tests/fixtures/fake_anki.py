"""In-memory AnkiConnect used by the sync tests."""

import asyncio
import itertools
import json
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from anki_link.domain.interfaces.anki_client import ActionResult, AnkiAction, IAnkiClient
from anki_link.exceptions import AnkiActionError

_QUERY_TERM = re.compile(r'(-?)(\w+):("(?:[^"\\]|\\.)*"|\S+)')


class FakeActionError(Exception):
    pass


@dataclass
class FakeNote:
    note_id: int
    card_id: int
    model_name: str
    deck: str
    fields: dict[str, str]
    tags: list[str] = field(default_factory=list)

    def info(self) -> dict[str, Any]:
        return {
            "noteId": self.note_id,
            "modelName": self.model_name,
            "tags": list(self.tags),
            "cards": [self.card_id],
            "fields": {
                name: {"value": value, "order": order}
                for order, (name, value) in enumerate(self.fields.items())
            },
        }


def _unquote(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return re.sub(r"\\(.)", r"\1", value)


class FakeAnkiConnect:
    """Answers AnkiConnect actions from in-memory state.

    Only the actions and query syntax the sync uses are understood.
    """

    def __init__(self, decks: tuple[str, ...] = ("Default",)):
        self.decks: set[str] = set(decks)
        self.models: dict[str, dict[str, Any]] = {}
        self.notes: dict[int, FakeNote] = {}
        self.requests: list[dict[str, Any]] = []
        self._ids = itertools.count(1_700_000_000_000)
        self._failures: dict[str, tuple[int, str]] = {}

    # Test helpers

    def fail_action(self, action: str, message: str, skip: int = 0) -> None:
        """Make the call after ``skip`` successful calls of ``action`` fail once."""
        self._failures[action] = (skip, message)

    def add_note(
        self, front: str, back: str, deck: str = "Default", tags: tuple[str, ...] = ()
    ) -> int:
        note_id = next(self._ids)
        self.decks.add(deck)
        self.notes[note_id] = FakeNote(
            note_id, next(self._ids), "AnkiLink Basic", deck,
            {"Front": front, "Back": back}, list(tags),
        )
        return note_id

    def actions_sent(self) -> list[str]:
        """Names of every action received, with multi requests flattened."""
        names: list[str] = []
        for request in self.requests:
            if request["action"] == "multi":
                names.extend(a["action"] for a in request["params"]["actions"])
            else:
                names.append(request["action"])
        return names

    # Transport

    def handle(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.requests.append(payload)
        return self._envelope(payload)

    def respx_handler(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=self.handle(json.loads(request.content)))

    def _envelope(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            result = self._dispatch(payload["action"], payload.get("params", {}))
        except FakeActionError as e:
            return {"result": None, "error": str(e)}
        return {"result": result, "error": None}

    def _dispatch(self, action: str, params: dict[str, Any]) -> Any:
        if action == "multi":
            return [self._envelope(sub) for sub in params["actions"]]

        if action in self._failures:
            skip, message = self._failures[action]
            if skip == 0:
                del self._failures[action]
                raise FakeActionError(message)
            self._failures[action] = (skip - 1, message)

        handler: Callable[[dict[str, Any]], Any] | None = getattr(
            self, f"_do_{action}", None
        )
        if handler is None:
            raise FakeActionError("unsupported action")
        return handler(params)

    # Actions

    def _do_version(self, params: dict[str, Any]) -> int:
        return 6

    def _do_deckNames(self, params: dict[str, Any]) -> list[str]:
        return sorted(self.decks)

    def _do_createDeck(self, params: dict[str, Any]) -> int:
        self.decks.add(params["deck"])
        return next(self._ids)

    def _do_modelNames(self, params: dict[str, Any]) -> list[str]:
        return sorted(self.models)

    def _do_createModel(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params["modelName"]
        if name in self.models:
            raise FakeActionError("Model name already exists")
        self.models[name] = {"fields": list(params["inOrderFields"]), "css": params["css"]}
        return {"name": name}

    def _model(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params["model"]["name"]
        if name not in self.models:
            raise FakeActionError(f"model was not found: {name}")
        return self.models[name]

    def _do_updateModelTemplates(self, params: dict[str, Any]) -> None:
        self._model(params)["templates"] = params["model"]["templates"]

    def _do_updateModelStyling(self, params: dict[str, Any]) -> None:
        self._model(params)["css"] = params["model"]["css"]

    def _do_addNote(self, params: dict[str, Any]) -> int:
        note = params["note"]
        if note["deckName"] not in self.decks:
            raise FakeActionError(f"deck was not found: {note['deckName']}")
        if note["modelName"] not in self.models:
            raise FakeActionError(f"model was not found: {note['modelName']}")
        note_id = next(self._ids)
        self.notes[note_id] = FakeNote(
            note_id, next(self._ids), note["modelName"], note["deckName"],
            dict(note["fields"]), list(note["tags"]),
        )
        return note_id

    def _do_notesInfo(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        return [
            self.notes[n].info() if n in self.notes else {} for n in params["notes"]
        ]

    def _do_updateNoteFields(self, params: dict[str, Any]) -> None:
        note = self.notes.get(params["note"]["id"])
        if note is None:
            raise FakeActionError("note was not found")
        note.fields.update(params["note"]["fields"])

    def _matches(self, note: FakeNote, query: str) -> bool:
        for negate, key, raw in _QUERY_TERM.findall(query):
            value = _unquote(raw)
            if key == "tag":
                hit = value.casefold() in (t.casefold() for t in note.tags)
            elif key == "deck" and value.endswith("::*"):
                hit = note.deck.startswith(value[:-1])
            elif key == "deck":
                hit = note.deck == value or note.deck.startswith(value + "::")
            else:
                raise FakeActionError(f"unsupported search term {key}")
            if hit == bool(negate):
                return False
        return True

    def _do_findNotes(self, params: dict[str, Any]) -> list[int]:
        return sorted(n.note_id for n in self.notes.values() if self._matches(n, params["query"]))

    def _do_addTags(self, params: dict[str, Any]) -> None:
        for note_id in params["notes"]:
            note = self.notes.get(note_id)
            if note is None:
                continue
            for tag in params["tags"].split():
                if tag.casefold() not in (t.casefold() for t in note.tags):
                    note.tags.append(tag)

    def _do_changeDeck(self, params: dict[str, Any]) -> None:
        self.decks.add(params["deck"])
        cards = set(params["cards"])
        for note in self.notes.values():
            if note.card_id in cards:
                note.deck = params["deck"]

    def _do_deleteNotes(self, params: dict[str, Any]) -> None:
        for note_id in params["notes"]:
            self.notes.pop(note_id, None)


class FakeAnkiClient(IAnkiClient):
    """IAnkiClient backed by a FakeAnkiConnect, without HTTP."""

    def __init__(self, anki: FakeAnkiConnect | None = None):
        self.anki = anki or FakeAnkiConnect()
        self.multi_calls: list[list[str]] = []
        self.before_multi: Callable[[list[AnkiAction]], None] | None = None

    async def invoke(self, action: str, params: dict[str, Any] | None = None) -> Any:
        body = self.anki.handle(AnkiAction(action, params or {}).to_payload())
        if body["error"] is not None:
            raise AnkiActionError(action, body["error"])
        return body["result"]

    async def multi(self, actions: list[AnkiAction]) -> list[ActionResult]:
        await asyncio.sleep(0)
        if self.before_multi is not None:
            self.before_multi(actions)
        self.multi_calls.append([a.action for a in actions])
        results = await self.invoke(
            "multi", {"actions": [{**a.to_payload(), "version": 6} for a in actions]}
        )
        return [ActionResult(error=r["error"], result=r["result"]) for r in results]
