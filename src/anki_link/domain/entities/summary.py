"""Externally observable result of one sync run."""

from __future__ import annotations

from dataclasses import dataclass


def _cards(count: int) -> str:
    return f"{count} card{'' if count == 1 else 's'}"


@dataclass(frozen=True)
class SyncSummary:
    added: int = 0
    modified: int = 0
    deleted: int = 0

    @property
    def is_noop(self) -> bool:
        return not (self.added or self.modified or self.deleted)

    def describe(self) -> str:
        """Render the one-line notice shown after a run."""
        return (
            f"Added {_cards(self.added)}, "
            f"modified {_cards(self.modified)}, "
            f"deleted {_cards(self.deleted)}."
        )
