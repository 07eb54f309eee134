"""MIME structure: message root, multipart splitting, and body selection.

The tree is at most two levels deep.  A multipart root is split into a
flat list of children; a child that is itself multipart keeps its
``boundary`` but is never split further.
"""

from __future__ import annotations

import logging
import re

from emlkit.charset import CharsetDecoder, default_decoder
from emlkit.decoding import decode_body
from emlkit.headers import decode_headers, parse_header_lines, split_lines, split_message
from emlkit.html_markdown import html_to_markdown
from emlkit.models import BodySource, MimePart

logger = logging.getLogger("emlkit")

_BOUNDARY_RE = re.compile(r"""boundary=["']?([^;"'\s]+)""", re.IGNORECASE)
_BLANK_LINE_RE = re.compile(r"\r?\n\r?\n")

HTML_TYPE = "text/html"
PLAIN_TYPE = "text/plain"


def extract_boundary(content_type: str | None) -> str | None:
    if not content_type:
        return None
    match = _BOUNDARY_RE.search(content_type)
    return match.group(1) if match else None


def _build_part(headers: dict[str, str], body: str) -> MimePart:
    content_type = headers.get("content-type")
    return MimePart(
        headers=headers,
        body=body,
        content_type=content_type,
        encoding=headers.get("content-transfer-encoding"),
        boundary=extract_boundary(content_type),
    )


def parse_mime_part(content: str) -> MimePart:
    """Parse one multipart section into a :class:`MimePart`.

    A section without a blank line has no header block: all of it is body.
    """
    match = _BLANK_LINE_RE.search(content)
    if match is None:
        return MimePart(body=content)
    headers = parse_header_lines(split_lines(content[: match.start()]))
    return _build_part(headers, content[match.end() :])


def split_multipart(body: str, boundary: str) -> list[MimePart]:
    """Split *body* on ``--<boundary>`` and parse each interior section.

    The preamble before the first delimiter and everything after the last
    one are discarded, as are sections that are empty after trimming.
    """
    delimiter = re.compile("--" + re.escape(boundary))
    sections = delimiter.split(body)

    parts: list[MimePart] = []
    for section in sections[1:-1]:
        section = section.strip()
        if section:
            parts.append(parse_mime_part(section))
    return parts


def parse_message(
    text: str, decoder: CharsetDecoder = default_decoder
) -> MimePart:
    """Parse a whole message into a root :class:`MimePart`.

    Root header values are RFC 2047-decoded and the body is trimmed.  When
    the root declares a boundary its children are filled in.
    """
    raw_headers, body = split_message(text)
    root = _build_part(decode_headers(raw_headers, decoder), body.strip())
    if root.boundary is not None:
        root.parts = split_multipart(root.body, root.boundary)
        logger.debug(
            "emlkit | multipart | boundary=%s | parts=%d", root.boundary, len(root.parts)
        )
    return root


def find_part(parts: list[MimePart], media_type: str) -> MimePart | None:
    """Return the first part whose Content-Type mentions *media_type*."""
    for part in parts:
        if part.content_type and media_type in part.content_type.lower():
            return part
    return None


def render_part(
    part: MimePart,
    decoder: CharsetDecoder = default_decoder,
    default_charset: str = "utf-8",
) -> tuple[str, BodySource]:
    """Decode a single part; HTML is additionally transcoded to Markdown."""
    text = decode_body(part.body, part.content_type, part.encoding, decoder, default_charset)
    if part.content_type and HTML_TYPE in part.content_type.lower():
        return html_to_markdown(text), BodySource.HTML_CONVERTED
    return text, BodySource.PLAIN_TEXT


def select_body(
    parts: list[MimePart],
    prefer_html: bool = True,
    decoder: CharsetDecoder = default_decoder,
    default_charset: str = "utf-8",
) -> tuple[str, BodySource]:
    """Pick the best representable child and render it.

    HTML is preferred by default because it carries structure the
    transcoder can express in Markdown.  Returns ``("", EMPTY)`` when no
    child is ``text/html`` or ``text/plain``.
    """
    order = (HTML_TYPE, PLAIN_TYPE) if prefer_html else (PLAIN_TYPE, HTML_TYPE)
    for media_type in order:
        part = find_part(parts, media_type)
        if part is not None:
            return render_part(part, decoder, default_charset)
    return "", BodySource.EMPTY
