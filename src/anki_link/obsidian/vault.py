"""Filesystem document store over an Obsidian vault."""

from collections.abc import Sequence
from pathlib import Path

import frontmatter
import yaml

from anki_link.domain.interfaces.document_store import DocumentHandle, IDocumentStore
from anki_link.exceptions import DocumentStoreError
from anki_link.utils.logging import get_logger

logger = get_logger(__name__)

LINE_SEPARATOR = "\n"


class VaultDocumentStore(IDocumentStore):
    """Markdown files under a vault directory.

    Handles are absolute paths. Directories whose name starts with a dot
    (``.obsidian``, ``.trash``) are not scanned.
    """

    def __init__(self, vault_path: Path, deck_key: str = "anki deck"):
        self.vault_path = vault_path
        self.deck_key = deck_key

    def _is_hidden(self, path: Path) -> bool:
        relative = path.relative_to(self.vault_path)
        return any(part.startswith(".") for part in relative.parts[:-1])

    def list_documents(self) -> list[Path]:
        if not self.vault_path.is_dir():
            msg = f"Vault directory does not exist: {self.vault_path}"
            raise DocumentStoreError(msg, suggestion="Check the vault_path setting")

        documents = [
            path
            for path in self.vault_path.rglob("*.md")
            if path.is_file() and not self._is_hidden(path)
        ]
        documents.sort(key=lambda p: p.relative_to(self.vault_path).as_posix())
        logger.debug("vault_documents_listed", vault=str(self.vault_path), count=len(documents))
        return documents

    def _read_text(self, handle: DocumentHandle) -> str:
        path = Path(str(handle))
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            msg = f"Cannot read {path}: {e}"
            raise DocumentStoreError(msg, context={"path": str(path)}) from e

    def read_lines(self, handle: DocumentHandle) -> list[str]:
        return self._read_text(handle).split(LINE_SEPARATOR)

    def write_lines(self, handle: DocumentHandle, lines: Sequence[str]) -> None:
        path = Path(str(handle))
        try:
            path.write_text(LINE_SEPARATOR.join(lines), encoding="utf-8")
        except OSError as e:
            msg = f"Cannot write {path}: {e}"
            raise DocumentStoreError(msg, context={"path": str(path)}) from e
        logger.debug("document_written", path=str(path), lines=len(lines))

    def read_group_metadata(self, handle: DocumentHandle) -> str | None:
        """Read the deck name from the document's YAML front matter."""
        text = self._read_text(handle)
        try:
            post = frontmatter.loads(text)
        except (yaml.YAMLError, ValueError) as e:
            logger.warning(
                "document_skipped_bad_frontmatter",
                path=str(handle),
                error=str(e),
            )
            return None

        value = post.metadata.get(self.deck_key)
        if not isinstance(value, str):
            return None
        return value.strip() or None
