"""Helpers that write flashcard callouts into notes."""

from pathlib import Path

from anki_link.obsidian.parser import CALLOUT_MARKER, QUOTE_MARKER

BENCHMARK_NOTES = 500
BENCHMARK_CARDS_PER_NOTE = 12
BENCHMARK_TARGET = "anki-link-benchmark"
BENCHMARK_DECK = "Benchmark::Demo"


def flashcard_header(front: str = "") -> str:
    """Header line of a new flashcard; an empty front gives the bare template."""
    return f"{QUOTE_MARKER} {CALLOUT_MARKER} {front}"


def flashcard_block(front: str, back: str = "") -> list[str]:
    """Lines of a flashcard callout with ``back`` quoted line by line.

    Raises:
        ValueError: If the front is blank or spans several lines
    """
    front = front.strip()
    if not front:
        raise ValueError("front must not be blank")
    if "\n" in front:
        raise ValueError("front must be a single line")

    lines = [flashcard_header(front)]
    for line in back.splitlines():
        lines.append(f"{QUOTE_MARKER} {line}" if line else QUOTE_MARKER)
    return lines


def append_flashcard(path: Path, front: str, back: str = "") -> None:
    """Append a flashcard to ``path``, separated from existing text by a blank line."""
    block = "\n".join(flashcard_block(front, back)) + "\n"
    existing = path.read_text(encoding="utf-8") if path.exists() else ""
    if existing and not existing.endswith("\n"):
        existing += "\n"
    if existing.strip():
        existing += "\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(existing + block, encoding="utf-8")


def benchmark_block(note_index: int, card_index: int) -> list[str]:
    front = f"Benchmark prompt {note_index}-{card_index}: what does this card test?"
    return [
        flashcard_header(front),
        f"> This is demo answer {note_index}-{card_index}.",
        ">",
        "> - Generated for sync/load testing",
        f"> - Note {note_index}, card {card_index}",
        ">",
        "> ```text",
        f"> token-{note_index}-{card_index}",
        "> ```",
        "",
    ]


def benchmark_note(note_index: int, cards: int, deck_name: str) -> str:
    header = f"---\nanki deck: {deck_name}\n---\n# Benchmark note {note_index}\n"
    blocks = "\n".join(
        "\n".join(benchmark_block(note_index, card)) for card in range(1, cards + 1)
    )
    return f"{header}{blocks}\n"


def write_benchmark_notes(
    output_dir: Path,
    notes: int = BENCHMARK_NOTES,
    cards: int = BENCHMARK_CARDS_PER_NOTE,
    deck_name: str = BENCHMARK_DECK,
) -> list[Path]:
    """Write ``notes`` demo notes with ``cards`` flashcards each.

    Returns:
        Paths of the written notes
    """
    if notes < 1 or cards < 1:
        raise ValueError("notes and cards must be positive")

    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for index in range(1, notes + 1):
        path = output_dir / f"benchmark-note-{index:04d}.md"
        path.write_text(benchmark_note(index, cards, deck_name), encoding="utf-8")
        written.append(path)
    return written
