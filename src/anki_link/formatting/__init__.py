"""Flashcard body formatting: lexing, segmentation and HTML rendering.

Bodies are split into prose, fenced code and ``$$`` math blocks. Prose is
rendered with mistune (inline code and inline math protected from it), code
becomes an escaped ``<pre><code>`` block and math a MathJax display block.
"""

from .inline import find_code_spans, protect_inline_math, restore_inline_math
from .lexer import BodyToken, FenceKind, lex_body, lex_line
from .markdown_converter import convert_markdown_to_html, sanitize_html
from .renderer import format_body, render_segment, segment_body
from .segments import BodySegment, CodeSegment, MathSegment, TextSegment, parse_segments

__all__ = [
    "BodySegment",
    "BodyToken",
    "CodeSegment",
    "FenceKind",
    "MathSegment",
    "TextSegment",
    "convert_markdown_to_html",
    "find_code_spans",
    "format_body",
    "lex_body",
    "lex_line",
    "parse_segments",
    "protect_inline_math",
    "render_segment",
    "restore_inline_math",
    "sanitize_html",
    "segment_body",
]
