"""Header block parsing and RFC 2047 encoded-word decoding.

Header names are lower-cased and trimmed.  A repeated header name
overwrites the earlier value (last occurrence wins).
"""

from __future__ import annotations

import re

from emlkit.charset import CharsetDecoder, default_decoder
from emlkit.decoding import decode_base64, decode_quoted_printable

_LINE_BREAK_RE = re.compile(r"\r?\n")
_ENCODED_WORD_RE = re.compile(r"=\?([^?]+)\?([QqBb])\?([^?]*)\?=")


def split_lines(text: str) -> list[str]:
    return _LINE_BREAK_RE.split(text)


def parse_header_lines(lines: list[str]) -> dict[str, str]:
    """Build a header map from raw header lines.

    Lines starting with a space or tab continue the previous header and
    are appended after a single space.  Lines without a colon, or with
    nothing before it, are dropped.
    """
    headers: dict[str, str] = {}
    current: str | None = None

    for line in lines:
        # folding whitespace is a leading space or tab only
        if line[:1] in (" ", "\t") and current:
            headers[current] += " " + line.strip()
            continue

        name, sep, value = line.partition(":")
        name = name.strip().lower()
        if not sep or not name:
            continue
        current = name
        headers[name] = value.strip()

    return headers


def split_message(text: str) -> tuple[dict[str, str], str]:
    """Split raw message text into a header map and the raw body.

    The first blank (or whitespace-only) line ends the header block.
    Without one, the lines are still read as headers and the whole text
    is also the body.
    The body is re-joined with ``\\n`` line endings.
    """
    lines = split_lines(text)
    for index, line in enumerate(lines):
        if not line.strip():
            return parse_header_lines(lines[:index]), "\n".join(lines[index + 1 :])
    return parse_header_lines(lines), "\n".join(lines)


def decode_header_value(
    value: str, decoder: CharsetDecoder = default_decoder
) -> str:
    """Decode every ``=?charset?Q|B?text?=`` token inside *value*.

    A token that fails to decode is left exactly as written; the rest of
    the value is still decoded.
    """

    def _decode_word(match: re.Match[str]) -> str:
        charset, encoding, encoded = match.groups()
        # RFC 2231 language suffix, e.g. "utf-8*en"
        charset = charset.split("*", 1)[0]
        if encoding.upper() == "Q":
            result = decode_quoted_printable(encoded.replace("_", " "), charset, decoder)
        else:
            result = decode_base64(encoded, charset, decoder)
        return result.value if result.ok else match.group(0)

    return _ENCODED_WORD_RE.sub(_decode_word, value)


def decode_headers(
    headers: dict[str, str], decoder: CharsetDecoder = default_decoder
) -> dict[str, str]:
    """Return a copy of *headers* with every value RFC 2047-decoded."""
    return {name: decode_header_value(value, decoder) for name, value in headers.items()}
