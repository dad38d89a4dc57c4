"""Line lexer for flashcard bodies.

Each body line is classified on its own, without looking ahead: either plain
text or a fence line. Whether a fence actually opens a block is decided by
the segment parser.
"""

from dataclasses import dataclass
from enum import Enum


class FenceKind(str, Enum):
    BACKTICK = "```"
    TILDE = "~~~"
    MATH = "$$"


@dataclass(frozen=True)
class BodyToken:
    """One lexed body line.

    ``fence`` is None for text lines. ``info`` is the trimmed text following
    a code fence marker (the language tag); always empty for math fences.
    """

    raw: str
    fence: FenceKind | None = None
    info: str = ""

    @property
    def is_fence(self) -> bool:
        return self.fence is not None

    def closes(self, kind: FenceKind) -> bool:
        """A closing fence has the same kind and no info string."""
        return self.fence is kind and not self.info


def lex_line(line: str) -> BodyToken:
    trimmed = line.strip()
    if trimmed == FenceKind.MATH.value:
        return BodyToken(line, FenceKind.MATH)
    for kind in (FenceKind.BACKTICK, FenceKind.TILDE):
        if trimmed.startswith(kind.value):
            return BodyToken(line, kind, trimmed[len(kind.value) :].strip())
    return BodyToken(line)


def lex_body(lines: list[str]) -> list[BodyToken]:
    return [lex_line(line) for line in lines]
