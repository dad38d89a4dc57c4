"""Group lexed body lines into text, code and math segments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from .lexer import BodyToken, FenceKind


@dataclass(frozen=True)
class TextSegment:
    lines: tuple[str, ...]

    def source_lines(self) -> list[str]:
        return list(self.lines)


@dataclass(frozen=True)
class _FencedSegment:
    """Lines between an opening and a closing fence, fences kept verbatim."""

    inner_lines: tuple[str, ...]
    opening: str
    closing: str

    def source_lines(self) -> list[str]:
        return [self.opening, *self.inner_lines, self.closing]


@dataclass(frozen=True)
class CodeSegment(_FencedSegment):
    language: str = ""

    @property
    def content(self) -> str:
        return "\n".join(self.inner_lines)


@dataclass(frozen=True)
class MathSegment(_FencedSegment):
    @property
    def latex(self) -> str:
        return "\n".join(self.inner_lines)


BodySegment: TypeAlias = TextSegment | CodeSegment | MathSegment


def _find_closing_fence(tokens: list[BodyToken], start: int, kind: FenceKind) -> int:
    for i in range(start, len(tokens)):
        if tokens[i].closes(kind):
            return i
    return -1


def parse_segments(tokens: list[BodyToken]) -> list[BodySegment]:
    """Partition tokens into segments without dropping any line.

    A fence opens a block only when a matching close (same kind, no info
    string) follows. Otherwise the fence line is kept as ordinary text.
    """
    segments: list[BodySegment] = []
    text_buffer: list[str] = []

    def flush_text() -> None:
        if text_buffer:
            segments.append(TextSegment(tuple(text_buffer)))
            text_buffer.clear()

    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.fence is None:
            text_buffer.append(token.raw)
            i += 1
            continue

        close_idx = _find_closing_fence(tokens, i + 1, token.fence)
        if close_idx == -1:
            text_buffer.append(token.raw)
            i += 1
            continue

        flush_text()
        inner = tuple(t.raw for t in tokens[i + 1 : close_idx])
        closing = tokens[close_idx].raw
        if token.fence is FenceKind.MATH:
            segments.append(MathSegment(inner, token.raw, closing))
        else:
            segments.append(CodeSegment(inner, token.raw, closing, token.info))
        i = close_idx + 1

    flush_text()
    return segments
