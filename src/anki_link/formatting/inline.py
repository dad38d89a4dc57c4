"""Inline escaping passes run on prose before Markdown rendering.

Inline code spans are left exactly as written. Inline math spans
(``$...$`` and ``$$...$$``) outside code spans are swapped for opaque
placeholder tokens so the Markdown renderer cannot touch their content, and
are restored to MathJax delimiters afterwards.
"""

import html
import uuid
from dataclasses import dataclass


def is_escaped(text: str, index: int) -> bool:
    """True when the character at ``index`` follows an odd run of backslashes."""
    count = 0
    i = index - 1
    while i >= 0 and text[i] == "\\":
        count += 1
        i -= 1
    return count % 2 == 1


def _run_length(text: str, start: int, char: str) -> int:
    end = start
    while end < len(text) and text[end] == char:
        end += 1
    return end - start


def find_code_spans(text: str) -> list[tuple[int, int]]:
    """Return ``(start, end)`` offsets of inline code spans.

    A span opens on a run of backticks and closes on the next run of the same
    length. A backslash-escaped backtick neither opens nor closes a span.
    """
    spans: list[tuple[int, int]] = []
    i = 0
    n = len(text)
    while i < n:
        if text[i] != "`":
            i += 1
            continue
        if is_escaped(text, i):
            i += 1
            continue

        length = _run_length(text, i, "`")
        j = i + length
        close_end = -1
        while j < n:
            if text[j] != "`":
                j += 1
                continue
            run = _run_length(text, j, "`")
            if run == length and not is_escaped(text, j):
                close_end = j + run
                break
            j += run

        if close_end == -1:
            # Unmatched run: literal backticks
            i += length
            continue
        spans.append((i, close_end))
        i = close_end
    return spans


@dataclass(frozen=True)
class MathPlaceholder:
    token: str
    latex: str
    display: bool

    def render(self) -> str:
        latex = html.escape(self.latex, quote=False)
        return f"\\[{latex}\\]" if self.display else f"\\({latex}\\)"


def _find_unescaped(text: str, needle: str, start: int, end: int) -> int:
    i = text.find(needle, start, end)
    while i != -1 and is_escaped(text, i):
        i = text.find(needle, i + 1, end)
    return i


class _MathProtector:
    def __init__(self) -> None:
        # Alphanumeric so Markdown leaves it alone
        self._prefix = f"ankilinkmath{uuid.uuid4().hex[:12]}n"
        self.placeholders: list[MathPlaceholder] = []

    def _placeholder(self, latex: str, display: bool) -> str:
        token = f"{self._prefix}{len(self.placeholders)}end"
        self.placeholders.append(MathPlaceholder(token, latex, display))
        return token

    def protect_region(self, text: str) -> str:
        out: list[str] = []
        i = 0
        n = len(text)
        while i < n:
            k = _find_unescaped(text, "$", i, n)
            if k == -1:
                out.append(text[i:])
                break
            out.append(text[i:k])

            if text.startswith("$$", k):
                close = _find_unescaped(text, "$$", k + 2, n)
                latex = text[k + 2 : close] if close != -1 else ""
                if close != -1 and latex.strip():
                    out.append(self._placeholder(latex, display=True))
                    i = close + 2
                else:
                    out.append("$$")
                    i = k + 2
                continue

            close = _find_unescaped(text, "$", k + 1, n)
            latex = text[k + 1 : close] if close != -1 else ""
            if (
                latex
                and latex == latex.strip()
                and "\n" not in latex
                and not text.startswith("$$", close)
            ):
                out.append(self._placeholder(latex, display=False))
                i = close + 1
            else:
                out.append("$")
                i = k + 1
        return "".join(out)


def protect_inline_math(text: str) -> tuple[str, list[MathPlaceholder]]:
    """Replace inline math outside code spans with placeholder tokens.

    Returns:
        The rewritten text and the placeholders needed to restore it
    """
    protector = _MathProtector()
    out: list[str] = []
    cursor = 0
    for start, end in find_code_spans(text):
        out.append(protector.protect_region(text[cursor:start]))
        out.append(text[start:end])
        cursor = end
    out.append(protector.protect_region(text[cursor:]))
    return "".join(out), protector.placeholders


def restore_inline_math(rendered: str, placeholders: list[MathPlaceholder]) -> str:
    """Swap placeholder tokens for MathJax inline/display delimiters."""
    for placeholder in placeholders:
        rendered = rendered.replace(placeholder.token, placeholder.render())
    return rendered
