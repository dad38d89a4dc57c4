"""Write newly assigned note ids back into flashcard headers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from anki_link.domain.entities.flashcard import FlashcardRecord
from anki_link.domain.interfaces.document_store import DocumentHandle, IDocumentStore
from anki_link.obsidian.parser import parse_preamble
from anki_link.sync.submitter import CreatedNote
from anki_link.utils.logging import get_logger

logger = get_logger(__name__)


def annotate_header(line: str, note_id: int) -> str:
    """Place ``%%note_id%%`` right after the callout marker.

    An existing annotation is replaced; the title is kept as written.

    Raises:
        ValueError: If ``line`` is not a flashcard header
    """
    preamble = parse_preamble(line)
    if preamble is None:
        msg = f"not a flashcard header: {line!r}"
        raise ValueError(msg)
    return f"{line[: preamble.marker_end]} %%{note_id}%% {preamble.title}"


def apply_identifiers(lines: Sequence[str], assignments: Mapping[int, int]) -> list[str]:
    """Return a copy of ``lines`` with ids spliced into the given header lines.

    Args:
        lines: Document lines
        assignments: Header line index to new note id

    Raises:
        ValueError: If an index does not point at a flashcard header
    """
    updated = list(lines)
    for line_index, note_id in assignments.items():
        if not 0 <= line_index < len(updated):
            msg = f"line {line_index} is outside the document"
            raise ValueError(msg)
        updated[line_index] = annotate_header(updated[line_index], note_id)
    return updated


def group_by_document(
    created: Iterable[CreatedNote],
) -> dict[DocumentHandle, dict[int, CreatedNote]]:
    grouped: dict[DocumentHandle, dict[int, CreatedNote]] = {}
    for note in created:
        grouped.setdefault(note.pending.handle, {})[note.pending.record.line_index] = note
    return grouped


def header_still_matches(line: str, record: FlashcardRecord) -> bool:
    """True when ``line`` is still the header ``record`` was parsed from.

    The title must be unchanged and the header may carry no id or only the
    record's own id, so another card's annotation is never replaced.
    """
    preamble = parse_preamble(line)
    if preamble is None or preamble.title != record.title:
        return False
    return preamble.identifier is None or preamble.identifier == record.identifier


class DocumentRewriter:
    """Writes each document with new ids exactly once."""

    def __init__(self, store: IDocumentStore):
        self.store = store

    def write_back(self, created: Iterable[CreatedNote]) -> int:
        """Rewrite the documents owning ``created`` notes.

        Documents are re-read first. A header that moved, was retitled or now
        belongs to another card is left alone and logged; the note it referred
        to is then an orphan and is deleted on the next run.

        Returns:
            Number of documents written
        """
        written = 0
        for handle, notes in group_by_document(created).items():
            lines = self.store.read_lines(handle)
            applicable = {
                index: note.note_id
                for index, note in notes.items()
                if index < len(lines) and header_still_matches(lines[index], note.pending.record)
            }
            for index in notes.keys() - applicable.keys():
                logger.warning(
                    "flashcard_header_moved",
                    document=str(handle),
                    line=index,
                    note_id=notes[index].note_id,
                )
            if not applicable:
                continue

            self.store.write_lines(handle, apply_identifiers(lines, applicable))
            written += 1
            logger.debug("identifiers_written", document=str(handle), count=len(applicable))
        return written
