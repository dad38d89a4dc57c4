"""Convert flashcard prose from Markdown to HTML for Anki.

Uses mistune for Markdown parsing and nh3 for HTML sanitization. Single
newlines become ``<br>`` (Obsidian renders callout lines that way) and GFM
tables are supported.
"""

import mistune
import nh3

# Allowed HTML tags for Anki cards (used by nh3 sanitizer)
ALLOWED_TAGS = {
    "p",
    "br",
    "strong",
    "b",
    "em",
    "i",
    "u",
    "s",
    "del",
    "mark",
    "code",
    "pre",
    "ul",
    "ol",
    "li",
    "table",
    "thead",
    "tbody",
    "tr",
    "th",
    "td",
    "blockquote",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "a",
    "img",
    "div",
    "span",
    "sup",
    "sub",
    "hr",
}

_GLOBAL_ATTRIBUTES = {"class", "id", "style"}

# "rel" is set through nh3's link_rel parameter, not allowed directly
_TAG_SPECIFIC_ATTRIBUTES = {
    "a": {"href", "title", "target"},
    "img": {"src", "alt", "title", "width", "height"},
    "td": {"colspan", "rowspan", "align"},
    "th": {"colspan", "rowspan", "align"},
}


def _build_allowed_attributes() -> dict[str, set[str]]:
    """Build allowed attributes dict with global attrs applied to all tags."""
    return {
        tag: _GLOBAL_ATTRIBUTES | _TAG_SPECIFIC_ATTRIBUTES.get(tag, set())
        for tag in ALLOWED_TAGS
    }


ALLOWED_ATTRIBUTES = _build_allowed_attributes()


def _create_mistune_converter() -> mistune.Markdown:
    """Create a configured mistune Markdown converter."""
    return mistune.create_markdown(
        escape=False,
        hard_wrap=True,
        plugins=["table", "strikethrough"],
    )


_converter = _create_mistune_converter()


def sanitize_html(html: str) -> str:
    """Sanitize HTML with nh3 so only Anki-safe tags and attributes remain."""
    if not html:
        return html
    return nh3.clean(
        html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        link_rel="noopener noreferrer",
    )


def convert_markdown_to_html(md_content: str, sanitize: bool = True) -> str:
    """
    Convert Markdown content to HTML.

    Args:
        md_content: Markdown-formatted text
        sanitize: Whether to sanitize HTML output (default True)

    Returns:
        HTML without trailing whitespace; empty for blank input
    """
    if not md_content.strip():
        return ""

    result = _converter(md_content)
    # With the HTML renderer, mistune returns a string
    html = result if isinstance(result, str) else str(result)
    if sanitize:
        html = sanitize_html(html)
    return html.rstrip()
