"""EML-to-Markdown conversion pipeline.

Parses RFC 5322 message text with the hand-written header, MIME and
decoding stages of this package (no use of the stdlib ``email`` parser),
selects the best body part and assembles a Markdown document.
"""

from __future__ import annotations

import logging

from emlkit.assembler import render_markdown
from emlkit.charset import CharsetDecoder, default_decoder
from emlkit.config import EmlConverterConfig
from emlkit.errors import ErrorCode, ParseError
from emlkit.mime import parse_message, render_part, select_body
from emlkit.models import BodySource, EmailData

logger = logging.getLogger("emlkit")


class EMLConverter:
    """Convert raw ``.eml`` text to Markdown.

    Holds no per-message state, so one instance can convert any number of
    messages one after another.
    """

    def __init__(
        self,
        config: EmlConverterConfig | None = None,
        decoder: CharsetDecoder | None = None,
    ) -> None:
        self.config = config or EmlConverterConfig()
        self.decoder = decoder or default_decoder

    def parse(self, text: str) -> EmailData:
        """Parse message text into an :class:`EmailData` summary."""
        config = self.config
        root = parse_message(text, self.decoder)

        if root.is_multipart:
            body, source = select_body(
                root.parts, config.prefer_html, self.decoder, config.default_charset
            )
        else:
            body, source = render_part(root, self.decoder, config.default_charset)

        nested = any(part.is_multipart for part in root.parts)
        if nested:
            logger.debug("emlkit | nested multipart not expanded")

        headers = root.headers
        return EmailData(
            headers=headers,
            subject=headers.get("subject") or config.placeholder_subject,
            from_address=headers.get("from") or config.placeholder_sender,
            to_address=headers.get("to") or config.placeholder_recipient,
            date=headers.get("date") or config.placeholder_date,
            body=body or config.placeholder_body,
            body_source=source if body else BodySource.EMPTY,
            nested_multipart=nested,
        )

    def parse_checked(self, raw_text: str, filename: str) -> EmailData:
        """Validate *raw_text* and parse it, raising :class:`ParseError`.

        Raises
        ------
        ParseError
            If the input is not a string, is empty or whitespace-only, or
            parsing fails unexpectedly.
        """
        if not isinstance(raw_text, str) or not raw_text:
            raise ParseError(filename, "Invalid EML content", ErrorCode.E_EML_INVALID_INPUT)

        cleaned = raw_text.strip()
        if not cleaned:
            raise ParseError(filename, "EML file is empty", ErrorCode.E_EML_EMPTY_INPUT)

        try:
            return self.parse(cleaned)
        except Exception as exc:
            logger.error(
                "emlkit | file=%s | code=%s | detail=%s",
                filename,
                ErrorCode.E_EML_PARSE_FAILED.value,
                exc,
            )
            raise ParseError(filename, str(exc) or type(exc).__name__) from exc

    def convert(self, raw_text: str, filename: str) -> str:
        """Convert one message to a Markdown document.

        Parameters
        ----------
        raw_text:
            Complete text of the ``.eml`` file.
        filename:
            Original file name, shown in the document and in errors.

        Returns
        -------
        str
            The Markdown document.
        """
        return render_markdown(self.parse_checked(raw_text, filename), filename)


def convert(
    raw_text: str, filename: str, config: EmlConverterConfig | None = None
) -> str:
    """Convert one message to Markdown with a fresh :class:`EMLConverter`."""
    return EMLConverter(config).convert(raw_text, filename)
