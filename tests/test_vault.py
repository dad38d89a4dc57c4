"""Tests for the filesystem vault store and note authoring helpers."""

from pathlib import Path

import pytest

from anki_link.exceptions import DocumentStoreError
from anki_link.obsidian import authoring
from anki_link.obsidian.parser import parse_document
from anki_link.obsidian.vault import VaultDocumentStore


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    root = tmp_path / "vault"
    root.mkdir()
    return root


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestListDocuments:
    def test_markdown_files_sorted_recursively(self, vault) -> None:
        write(vault / "b.md", "")
        write(vault / "a" / "z.md", "")
        write(vault / "a.md", "")
        write(vault / "image.png", "")

        documents = VaultDocumentStore(vault).list_documents()

        assert [p.relative_to(vault).as_posix() for p in documents] == ["a.md", "a/z.md", "b.md"]

    def test_hidden_directories_skipped(self, vault) -> None:
        write(vault / ".obsidian" / "workspace.md", "")
        write(vault / ".trash" / "old.md", "")
        write(vault / "note.md", "")

        documents = VaultDocumentStore(vault).list_documents()

        assert [p.name for p in documents] == ["note.md"]

    def test_missing_vault(self, tmp_path) -> None:
        with pytest.raises(DocumentStoreError):
            VaultDocumentStore(tmp_path / "missing").list_documents()


class TestReadWrite:
    def test_lines_round_trip(self, vault) -> None:
        """Writing the lines read leaves the file byte-identical."""
        text = "---\nanki deck: X\n---\n> [!flashcard] Q\n> A\n"
        path = write(vault / "n.md", text)
        store = VaultDocumentStore(vault)

        store.write_lines(path, store.read_lines(path))

        assert path.read_text(encoding="utf-8") == text

    def test_read_missing_file(self, vault) -> None:
        with pytest.raises(DocumentStoreError):
            VaultDocumentStore(vault).read_lines(vault / "gone.md")


class TestGroupMetadata:
    def test_deck_from_front_matter(self, vault) -> None:
        path = write(vault / "n.md", "---\nanki deck: '  Languages::Spanish '\n---\nBody\n")

        assert VaultDocumentStore(vault).read_group_metadata(path) == "Languages::Spanish"

    @pytest.mark.parametrize(
        "text",
        [
            "No front matter\n",
            "---\ntags: [a]\n---\n",
            "---\nanki deck: ''\n---\n",
            "---\nanki deck: 42\n---\n",
            "---\nanki deck: [a, b]\n---\n",
        ],
    )
    def test_no_deck(self, vault, text) -> None:
        path = write(vault / "n.md", text)

        assert VaultDocumentStore(vault).read_group_metadata(path) is None

    def test_invalid_yaml_is_no_deck(self, vault) -> None:
        path = write(vault / "n.md", "---\nanki deck: [unclosed\n---\n")

        assert VaultDocumentStore(vault).read_group_metadata(path) is None

    def test_custom_key(self, vault) -> None:
        path = write(vault / "n.md", "---\ndeck: Custom\n---\n")

        assert VaultDocumentStore(vault, deck_key="deck").read_group_metadata(path) == "Custom"


class TestAuthoring:
    def test_flashcard_block(self) -> None:
        assert authoring.flashcard_block("Q?", "line 1\n\nline 2") == [
            "> [!flashcard] Q?",
            "> line 1",
            ">",
            "> line 2",
        ]

    @pytest.mark.parametrize("front", ["", "   ", "two\nlines"])
    def test_invalid_front(self, front) -> None:
        with pytest.raises(ValueError):
            authoring.flashcard_block(front)

    def test_append_to_existing_note(self, tmp_path) -> None:
        path = write(tmp_path / "n.md", "# Notes")

        authoring.append_flashcard(path, "Q?", "A.")

        assert path.read_text(encoding="utf-8") == "# Notes\n\n> [!flashcard] Q?\n> A.\n"

    def test_append_creates_file(self, tmp_path) -> None:
        path = tmp_path / "new" / "n.md"

        authoring.append_flashcard(path, "Q?")

        assert path.read_text(encoding="utf-8") == "> [!flashcard] Q?\n"

    def test_benchmark_notes_parse(self, tmp_path) -> None:
        """Generated notes hold the requested flashcards with code blocks."""
        paths = authoring.write_benchmark_notes(tmp_path, notes=2, cards=3, deck_name="Bench")

        assert [p.name for p in paths] == ["benchmark-note-0001.md", "benchmark-note-0002.md"]
        store = VaultDocumentStore(tmp_path)
        assert store.read_group_metadata(paths[0]) == "Bench"
        records = parse_document(store.read_lines(paths[1]), "Bench")
        assert [r.title for r in records] == [
            f"Benchmark prompt 2-{i}: what does this card test?" for i in (1, 2, 3)
        ]
        assert '<code class="language-text">token-2-1</code>' in records[0].fields.back
