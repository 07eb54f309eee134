"""Charset collaborator used by the body and header decoders.

Defines the ``CharsetDecoder`` protocol (``decode`` + ``is_supported``) and
``CodecRegistryDecoder``, the default implementation backed by Python's
codec registry, which covers UTF-*, ISO-8859-*, Windows-125x, KOI8-*,
Shift-JIS, EUC-*, GB18030, Big5 and the other common legacy charsets.
"""

from __future__ import annotations

import codecs
from typing import Protocol, runtime_checkable


@runtime_checkable
class CharsetDecoder(Protocol):
    """Interface for turning raw bytes into text in a named charset."""

    def decode(self, data: bytes, charset: str, errors: str = "strict") -> str:
        """Decode *data* using *charset*. Raises on unknown charsets."""
        ...

    def is_supported(self, charset: str) -> bool:
        """Return True if *charset* can be decoded."""
        ...


class CodecRegistryDecoder:
    """``CharsetDecoder`` backed by the text codecs of the codec registry."""

    def decode(self, data: bytes, charset: str, errors: str = "strict") -> str:
        return data.decode(charset, errors)

    def is_supported(self, charset: str) -> bool:
        try:
            info = codecs.lookup(charset)
        except (LookupError, ValueError):
            return False
        # bytes-to-bytes codecs such as base64 are not charsets
        return getattr(info, "_is_text_encoding", True)


def to_raw_bytes(text: str) -> bytes:
    """Recover the byte sequence *text* was read from.

    Inputs are read as UTF-8 with ``surrogateescape``, so undecodable
    8-bit bytes survive as lone surrogates and round-trip exactly here.
    """
    return text.encode("utf-8", "surrogateescape")


default_decoder = CodecRegistryDecoder()
