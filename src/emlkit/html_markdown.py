"""Regex-driven HTML-to-Markdown transcoder.

:func:`html_to_markdown` runs an ordered list of substitution passes over
the decoded HTML.  Each pass is a plain ``str -> str`` function listed in
:data:`PASSES`; the order is load-bearing (tags are stripped before
entities are decoded, and ``&amp;`` is decoded last).

This is not a DOM parser.  Deeply nested or malformed markup degrades to
its text content rather than failing.
"""

from __future__ import annotations

import re
from typing import Callable

_I = re.IGNORECASE
_IS = re.IGNORECASE | re.DOTALL

_DOCUMENT_TAG_RES = (
    re.compile(r"<!doctype[^>]*>", _I),
    re.compile(r"</?html\b[^>]*>", _I),
    re.compile(r"</?head\b[^>]*>", _I),
    re.compile(r"</?body\b[^>]*>", _I),
    re.compile(r"<title\b[^>]*>.*?</title>", _IS),
    re.compile(r"<meta\b[^>]*>", _I),
)
_SCRIPT_RE = re.compile(r"<script\b[^>]*>.*?</script>", _IS)
_STYLE_RE = re.compile(r"<style\b[^>]*>.*?</style>", _IS)
_HEADING_RE = re.compile(r"<h([1-6])\b[^>]*>(.*?)</h\1>", _IS)
_TABLE_RE = re.compile(r"<table\b[^>]*>(.*?)</table>", _IS)
_ROW_RE = re.compile(r"<tr\b[^>]*>(.*?)</tr>", _IS)
_CELL_RE = re.compile(r"<t[hd]\b[^>]*>(.*?)</t[hd]>", _IS)
_BOLD_RE = re.compile(r"<(strong|b)\b[^>]*>(.*?)</\1>", _I)
_ITALIC_RE = re.compile(r"<(em|i)\b[^>]*>(.*?)</\1>", _I)
_LINK_RE = re.compile(r"""<a\b[^>]*href=["']([^"']*)["'][^>]*>(.*?)</a>""", _I)
_IMG_RE = re.compile(r"<img\b([^>]*)>", _I)
_SRC_ATTR_RE = re.compile(r"""\bsrc=["']([^"']*)["']""", _I)
_ALT_ATTR_RE = re.compile(r"""\balt=["']([^"']*)["']""", _I)
_PRE_RE = re.compile(r"<pre\b[^>]*>(.*?)</pre>", _IS)
_DIV_RE = re.compile(r"</?div\b[^>]*>", _I)
_P_CLOSE_RE = re.compile(r"</p>", _I)
_P_OPEN_RE = re.compile(r"<p\b[^>]*>", _I)
_BR_RE = re.compile(r"<br\s*/?>", _I)
_LIST_CONTAINER_RE = re.compile(r"</?(?:ul|ol)\b[^>]*>", _I)
_LIST_ITEM_RE = re.compile(r"<li\b[^>]*>(.*?)</li>", _I)
_BLOCKQUOTE_RE = re.compile(r"<blockquote\b[^>]*>(.*?)</blockquote>", _IS)
_ANY_TAG_RE = re.compile(r"<[^>]*>")
_SPACE_RUN_RE = re.compile(r"\s+")
_BLANK_RUN_RE = re.compile(r"\n\s*\n\s*\n+")

_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&amp;", "&"),
)


def strip_document_tags(html: str) -> str:
    for pattern in _DOCUMENT_TAG_RES:
        html = pattern.sub("", html)
    return html


def strip_scripts_and_styles(html: str) -> str:
    return _STYLE_RE.sub("", _SCRIPT_RE.sub("", html))


def convert_headings(html: str) -> str:
    def _heading(match: re.Match[str]) -> str:
        level = int(match.group(1))
        return "\n" + "#" * level + " " + match.group(2).strip() + "\n\n"

    return _HEADING_RE.sub(_heading, html)


def _cell_text(cell: str) -> str:
    return _SPACE_RUN_RE.sub(" ", _ANY_TAG_RE.sub("", cell)).strip()


def convert_tables(html: str) -> str:
    """Render each ``<table>`` as a pipe table.

    The first row that has cells is treated as the header and followed by
    a ``---`` separator row.  Column spans are ignored.
    """

    def _table(match: re.Match[str]) -> str:
        lines: list[str] = []
        for row in _ROW_RE.findall(match.group(1)):
            cells = [_cell_text(cell) for cell in _CELL_RE.findall(row)]
            if not cells:
                continue
            lines.append("| " + " | ".join(cells) + " |")
            if len(lines) == 1:
                lines.append("| " + " | ".join("---" for _ in cells) + " |")
        body = "".join(line + "\n" for line in lines)
        return "\n\n" + body + "\n\n"

    return _TABLE_RE.sub(_table, html)


def convert_emphasis(html: str) -> str:
    html = _BOLD_RE.sub(r"**\2**", html)
    return _ITALIC_RE.sub(r"_\2_", html)


def convert_links(html: str) -> str:
    return _LINK_RE.sub(r"[\2](\1)", html)


def convert_images(html: str) -> str:
    def _image(match: re.Match[str]) -> str:
        attrs = match.group(1)
        src = _SRC_ATTR_RE.search(attrs)
        if src is None:
            return ""
        alt = _ALT_ATTR_RE.search(attrs)
        return f"![{alt.group(1) if alt else ''}]({src.group(1)})"

    return _IMG_RE.sub(_image, html)


def convert_preformatted(html: str) -> str:
    def _pre(match: re.Match[str]) -> str:
        code = _ANY_TAG_RE.sub("", match.group(1)).strip()
        return "\n\n```\n" + code + "\n```\n\n"

    return _PRE_RE.sub(_pre, html)


def convert_divs(html: str) -> str:
    return _DIV_RE.sub("\n", html)


def convert_paragraphs(html: str) -> str:
    html = _P_CLOSE_RE.sub("\n\n", html)
    html = _P_OPEN_RE.sub("", html)
    return _BR_RE.sub("\n", html)


def convert_lists(html: str) -> str:
    # Flat bullets only: no nesting depth and no ordered numbering.
    html = _LIST_CONTAINER_RE.sub("\n", html)
    return _LIST_ITEM_RE.sub(r"- \1\n", html)


def convert_blockquotes(html: str) -> str:
    def _quote(match: re.Match[str]) -> str:
        quoted = "\n".join("> " + line.strip() for line in match.group(1).split("\n"))
        return "\n" + quoted + "\n\n"

    return _BLOCKQUOTE_RE.sub(_quote, html)


def strip_remaining_tags(html: str) -> str:
    return _ANY_TAG_RE.sub("", html)


def decode_entities(text: str) -> str:
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def normalize_whitespace(text: str) -> str:
    return _BLANK_RUN_RE.sub("\n\n", text).strip()


PASSES: tuple[Callable[[str], str], ...] = (
    strip_document_tags,
    strip_scripts_and_styles,
    convert_headings,
    convert_tables,
    convert_emphasis,
    convert_links,
    convert_images,
    convert_preformatted,
    convert_divs,
    convert_paragraphs,
    convert_lists,
    convert_blockquotes,
    strip_remaining_tags,
    decode_entities,
    normalize_whitespace,
)


def html_to_markdown(html: str) -> str:
    """Convert an HTML string to Markdown.

    Parameters
    ----------
    html:
        Decoded HTML markup.  Anything that is not a ``str`` yields ``""``.

    Returns
    -------
    str
        Markdown text with no remaining tags, trimmed.
    """
    if not html or not isinstance(html, str):
        return ""

    for transform in PASSES:
        html = transform(html)
    return html
