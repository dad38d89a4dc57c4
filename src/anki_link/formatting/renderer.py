"""Render a flashcard body into the HTML stored in the ``Back`` field."""

import html

from .inline import protect_inline_math, restore_inline_math
from .lexer import BodyToken, lex_body, lex_line
from .markdown_converter import convert_markdown_to_html
from .segments import BodySegment, CodeSegment, MathSegment, TextSegment, parse_segments


def _neutralize_fence(token: BodyToken) -> str:
    """Backslash-escape every marker character of an unmatched fence line."""
    stripped = token.raw.lstrip()
    indent = token.raw[: len(token.raw) - len(stripped)]
    marker = stripped[0]
    run = len(stripped) - len(stripped.lstrip(marker))
    return indent + f"\\{marker}" * run + stripped[run:]


def _prose_line(token: BodyToken) -> str:
    return _neutralize_fence(token) if token.is_fence else token.raw


def render_text(segment: TextSegment) -> str:
    source = "\n".join(_prose_line(lex_line(line)) for line in segment.lines)
    protected, placeholders = protect_inline_math(source)
    rendered = convert_markdown_to_html(protected)
    return restore_inline_math(rendered, placeholders)


def render_code(segment: CodeSegment) -> str:
    language = segment.language.split()[0] if segment.language else ""
    class_attr = (
        f' class="language-{html.escape(language, quote=True)}"' if language else ""
    )
    return f"<pre><code{class_attr}>{html.escape(segment.content, quote=False)}</code></pre>"


def render_math(segment: MathSegment) -> str:
    return f"\\[{html.escape(segment.latex, quote=False)}\\]"


def render_segment(segment: BodySegment) -> str:
    if isinstance(segment, TextSegment):
        return render_text(segment)
    if isinstance(segment, CodeSegment):
        return render_code(segment)
    return render_math(segment)


def segment_body(lines: list[str]) -> list[BodySegment]:
    return parse_segments(lex_body(lines))


def format_body(lines: list[str]) -> str:
    """Lex, segment and render body lines, concatenating segments in order."""
    return "".join(render_segment(segment) for segment in segment_body(lines))
