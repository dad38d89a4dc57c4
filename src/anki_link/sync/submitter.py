"""Submission of a mutation batch as chunked ``multi`` requests."""

from __future__ import annotations

from dataclasses import dataclass

from anki_link.anki import actions
from anki_link.domain.interfaces.anki_client import AnkiAction, IAnkiClient
from anki_link.exceptions import AnkiActionError, AnkiError, ResponseShapeError
from anki_link.sync.batch import MutationBatch, PendingCreate
from anki_link.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PlannedAction:
    """An action to submit; ``create`` is set for ``addNote`` actions."""

    action: AnkiAction
    create: PendingCreate | None = None


@dataclass(frozen=True)
class CreatedNote:
    pending: PendingCreate
    note_id: int


@dataclass(frozen=True)
class SubmissionOutcome:
    """Notes created so far, and the error that stopped submission if any.

    Created notes are reported even on failure so their identifiers can be
    written back before the error is raised.
    """

    created: tuple[CreatedNote, ...]
    error: AnkiError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def build_actions(
    batch: MutationBatch, model_name: str, managed_tag: str
) -> list[PlannedAction]:
    """Order a batch as creates, field updates, deck moves, tags, deletes."""
    planned = [
        PlannedAction(
            actions.add_note(
                pending.record.deck_name,
                model_name,
                pending.record.fields.as_anki(),
                [managed_tag],
            ),
            create=pending,
        )
        for pending in batch.create
    ]
    planned.extend(
        PlannedAction(actions.update_note_fields(update.note_id, update.fields.as_anki()))
        for update in batch.update_fields
    )

    cards_by_deck: dict[str, list[int]] = {}
    for move in batch.change_deck:
        cards_by_deck.setdefault(move.deck_name, []).extend(move.card_ids)
    planned.extend(
        PlannedAction(actions.change_deck(card_ids, deck))
        for deck, card_ids in cards_by_deck.items()
        if card_ids
    )

    if batch.add_tag:
        planned.append(PlannedAction(actions.add_tags(batch.add_tag, managed_tag)))
    if batch.delete:
        planned.append(PlannedAction(actions.delete_notes(batch.delete)))
    return planned


def _created_id(result: object) -> int:
    if not isinstance(result, int) or isinstance(result, bool):
        msg = f"addNote returned {result!r} instead of a note id"
        raise ResponseShapeError(msg)
    return result


class BatchSubmitter:
    """Submits a batch in chunks of at most ``max_actions`` actions."""

    def __init__(
        self,
        client: IAnkiClient,
        model_name: str,
        managed_tag: str,
        max_actions: int = 500,
    ):
        if max_actions < 1:
            raise ValueError("max_actions must be positive")
        self.client = client
        self.model_name = model_name
        self.managed_tag = managed_tag
        self.max_actions = max_actions

    def chunks(self, planned: list[PlannedAction]) -> list[list[PlannedAction]]:
        size = self.max_actions
        return [planned[i : i + size] for i in range(0, len(planned), size)]

    async def submit(self, batch: MutationBatch) -> SubmissionOutcome:
        """Submit every chunk in order, stopping at the first failed chunk.

        Within a chunk each action succeeds or fails on its own, so the ids
        of every successful create in the failing chunk are still collected.
        """
        created: list[CreatedNote] = []
        chunks = self.chunks(build_actions(batch, self.model_name, self.managed_tag))

        for index, chunk in enumerate(chunks):
            try:
                results = await self.client.multi([p.action for p in chunk])
            except AnkiError as e:
                logger.warning("batch_chunk_failed", chunk=index, error=str(e))
                return SubmissionOutcome(tuple(created), e)

            if len(results) != len(chunk):
                msg = f"multi returned {len(results)} results for {len(chunk)} actions"
                return SubmissionOutcome(tuple(created), ResponseShapeError(msg))

            error: AnkiError | None = None
            for planned, result in zip(chunk, results):
                if not result.ok:
                    if error is None:
                        error = AnkiActionError(
                            planned.action.action,
                            str(result.error),
                            context={"chunk": index},
                        )
                    continue
                if planned.create is None:
                    continue
                try:
                    note_id = _created_id(result.result)
                except ResponseShapeError as e:
                    if error is None:
                        error = e
                    continue
                created.append(CreatedNote(planned.create, note_id))

            logger.debug(
                "batch_chunk_submitted",
                chunk=index,
                chunks=len(chunks),
                actions=len(chunk),
                failed=error is not None,
            )
            if error is not None:
                return SubmissionOutcome(tuple(created), error)

        return SubmissionOutcome(tuple(created))
