"""Content-transfer-encoding and charset decoding for message bodies.

Every decoder returns a :class:`DecodeResult`.  A failed step carries the
original input as its value, so callers can always use ``result.value``
and decoding never aborts a conversion.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass

from emlkit.charset import CharsetDecoder, default_decoder, to_raw_bytes

logger = logging.getLogger("emlkit")

_CHARSET_RE = re.compile(r"""charset=["']?([^;"'\s]+)""", re.IGNORECASE)
_SOFT_LINE_BREAK_RE = re.compile(r"=\r?\n")
_QP_ESCAPE_RE = re.compile(r"=([0-9A-Fa-f]{2})")
_WHITESPACE_RE = re.compile(r"\s+")

# Charsets whose text needs no reinterpretation after a UTF-8 read.
_PASSTHROUGH_CHARSETS = {"utf-8", "utf8", "us-ascii", "ascii"}


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of one decode step: success flag plus the usable value."""

    ok: bool
    value: str

    @classmethod
    def failed(cls, original: str) -> DecodeResult:
        return cls(ok=False, value=original)


def resolve_charset(
    content_type: str | None,
    decoder: CharsetDecoder = default_decoder,
    default: str = "utf-8",
) -> str:
    """Return the lower-cased ``charset=`` parameter of *content_type*.

    Falls back to *default* when the parameter is absent or names a
    charset the decoder does not know.
    """
    if not content_type:
        return default
    match = _CHARSET_RE.search(content_type)
    if not match:
        return default
    charset = match.group(1).lower()
    if not decoder.is_supported(charset):
        logger.debug("emlkit | unknown charset=%s | using=%s", charset, default)
        return default
    return charset


def decode_quoted_printable(
    text: str,
    charset: str = "utf-8",
    decoder: CharsetDecoder = default_decoder,
) -> DecodeResult:
    """Decode quoted-printable *text* and interpret the bytes as *charset*.

    Soft line breaks are removed first.  ``=XX`` with two hex digits becomes
    that byte; every other character (including a stray ``=``) stands for
    itself.
    """
    unfolded = _SOFT_LINE_BREAK_RE.sub("", text)

    try:
        raw = bytearray()
        pos = 0
        for match in _QP_ESCAPE_RE.finditer(unfolded):
            raw += to_raw_bytes(unfolded[pos : match.start()])
            raw.append(int(match.group(1), 16))
            pos = match.end()
        raw += to_raw_bytes(unfolded[pos:])
        return DecodeResult(ok=True, value=decoder.decode(bytes(raw), charset, "replace"))
    except (LookupError, ValueError) as exc:
        logger.debug("emlkit | quoted-printable | fallback to original | detail=%s", exc)
        return DecodeResult.failed(text)


def decode_base64(
    text: str,
    charset: str = "utf-8",
    decoder: CharsetDecoder = default_decoder,
) -> DecodeResult:
    """Decode a base64 payload and interpret the bytes as *charset*.

    Line breaks and other whitespace are ignored and missing padding is
    tolerated; any other non-alphabet character fails the step.
    """
    payload = _WHITESPACE_RE.sub("", text)
    payload += "=" * (-len(payload) % 4)
    try:
        data = base64.b64decode(payload, validate=True)
        return DecodeResult(ok=True, value=decoder.decode(data, charset, "replace"))
    except (binascii.Error, LookupError, ValueError) as exc:
        logger.debug("emlkit | base64 | fallback to original | detail=%s", exc)
        return DecodeResult.failed(text)


def reinterpret_charset(
    text: str,
    charset: str,
    decoder: CharsetDecoder = default_decoder,
) -> DecodeResult:
    """Re-decode 8-bit *text* using *charset*."""
    try:
        return DecodeResult(ok=True, value=decoder.decode(to_raw_bytes(text), charset, "replace"))
    except (LookupError, ValueError):
        return DecodeResult.failed(text)


def is_passthrough_charset(charset: str) -> bool:
    return charset.lower().replace("_", "-") in _PASSTHROUGH_CHARSETS


def decode_body(
    text: str,
    content_type: str | None = None,
    transfer_encoding: str | None = None,
    decoder: CharsetDecoder = default_decoder,
    default_charset: str = "utf-8",
) -> str:
    """Apply transfer decoding and charset conversion to a body.

    Parameters
    ----------
    text:
        Raw body text as found in the message.
    content_type:
        The part's ``Content-Type`` value; only ``charset=`` is used.
    transfer_encoding:
        ``quoted-printable``, ``base64``, or anything else (no decoding).
    decoder:
        Charset collaborator.
    default_charset:
        Charset assumed when none (or an unknown one) is declared.

    Returns
    -------
    str
        Decoded text, or *text* unchanged when a step fails.
    """
    if not text:
        return ""

    charset = resolve_charset(content_type, decoder, default_charset)
    encoding = (transfer_encoding or "").strip().lower()

    if encoding == "quoted-printable":
        return decode_quoted_printable(text, charset, decoder).value
    if encoding == "base64":
        return decode_base64(text, charset, decoder).value
    if not is_passthrough_charset(charset) and decoder.is_supported(charset):
        return reinterpret_charset(text, charset, decoder).value
    return text
