"""Flashcard callout parser for Obsidian notes.

A flashcard is a callout whose header line names the ``flashcard`` type::

    > [!flashcard] %%1700000000000%% What is 2+2?
    > Four.

The ``%%...%%`` comment carries the Anki note id once the card has been
created. Every following line that starts with ``>`` belongs to the body,
up to the first non-quoted line or the next flashcard header.
"""

import re
from dataclasses import dataclass

from anki_link.domain.entities.flashcard import FlashcardRecord, NoteFields
from anki_link.formatting.renderer import format_body
from anki_link.utils.logging import get_logger

logger = get_logger(__name__)

CALLOUT_MARKER = "[!flashcard]"
QUOTE_MARKER = ">"

PREAMBLE_PATTERN = re.compile(
    r"^>\s*(?P<marker>\[!flashcard\])\s*(?:%%(?P<id>\d+)%%)?\s*(?P<title>.*)$"
)
_BODY_PREFIX = re.compile(r"^> ?")


@dataclass(frozen=True)
class Preamble:
    """Parsed flashcard header line.

    ``marker_end`` is the offset just past ``[!flashcard]``; the identifier
    annotation is written back at that position.
    """

    identifier: int | None
    title: str
    marker_end: int


def parse_preamble(line: str) -> Preamble | None:
    """Recognize a flashcard header line.

    Returns None for anything that is not exactly a header, including lines
    that merely look like one. The title may be empty.
    """
    match = PREAMBLE_PATTERN.match(line)
    if not match:
        return None
    raw_id = match.group("id")
    return Preamble(
        identifier=int(raw_id) if raw_id is not None else None,
        title=match.group("title"),
        marker_end=match.end("marker"),
    )


def extract_body(lines: list[str]) -> list[str]:
    """Collect the quoted lines following a header.

    Stops at the first line that is not quoted, at the next flashcard header
    or at the end of the document. Each line loses its ``>`` and at most one
    following space.
    """
    body: list[str] = []
    for line in lines:
        if parse_preamble(line) is not None:
            break
        if not line.startswith(QUOTE_MARKER):
            break
        body.append(_BODY_PREFIX.sub("", line, count=1))
    return body


def parse_document(lines: list[str], deck_name: str) -> list[FlashcardRecord]:
    """Parse every flashcard in a document, in document order.

    Args:
        lines: Document text split into lines
        deck_name: Deck resolved for the whole document

    Returns:
        One FlashcardRecord per header with a non-empty title
    """
    records: list[FlashcardRecord] = []
    i = 0
    while i < len(lines):
        preamble = parse_preamble(lines[i])
        if preamble is None or not preamble.title:
            if preamble is not None:
                logger.debug("flashcard_header_without_title", line=i)
            i += 1
            continue

        body_lines = extract_body(lines[i + 1 :])
        records.append(
            FlashcardRecord(
                identifier=preamble.identifier,
                line_index=i,
                title=preamble.title,
                deck_name=deck_name,
                fields=NoteFields(front=preamble.title, back=format_body(body_lines)),
            )
        )
        i += len(body_lines) + 1
    return records
