"""Tests for emlkit.converter."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from emlkit.config import EmlConverterConfig
from emlkit.converter import EMLConverter, convert
from emlkit.errors import ErrorCode, ParseError
from emlkit.models import BodySource

from tests.conftest import build_eml


def _message_section(markdown: str) -> str:
    return markdown.split("## Message\n\n", 1)[1]


class TestConvert:
    def test_plain_body_is_trimmed_raw_body(self):
        raw = "Subject: Hi\nFrom: a@example.com\n\n\n  Hello world.\nSecond line.  \n\n"
        markdown = convert(raw, "hi.eml")
        assert _message_section(markdown) == "Hello world.\nSecond line.\n\n"

    def test_text_without_header_block_is_body(self):
        markdown = convert("Hello world", "x.eml")
        assert markdown.startswith("# No Subject\n")
        assert _message_section(markdown) == "Hello world\n\n"

    def test_headers_rendered(self, plain_eml):
        markdown = convert(plain_eml, "test.eml")
        assert markdown.startswith("# Test Subject\n\n")
        assert "**From:** sender@example.com\n" in markdown
        assert "**To:** recipient@example.com\n" in markdown
        assert "**Date:** Mon, 17 Feb 2026 12:00:00 +0000\n" in markdown
        assert "**Original File:** test.eml\n" in markdown
        assert "Plain version only." in markdown

    def test_missing_headers_use_placeholders(self):
        markdown = convert("X-Mailer: test\n\nBody here", "bare.eml")
        assert "# No Subject\n" in markdown
        assert "**From:** Unknown Sender\n" in markdown
        assert "**To:** Unknown Recipient\n" in markdown
        assert "**Date:** Unknown Date\n" in markdown

    def test_missing_body_placeholder(self):
        raw = "Subject: Styles only\nContent-Type: text/html\n\n<style>p { color: red; }</style>"
        markdown = convert(raw, "empty-body.eml")
        assert _message_section(markdown) == "No message content found\n\n"

    def test_custom_placeholders(self):
        config = EmlConverterConfig(placeholder_subject="(untitled)")
        assert convert("From: a@x\n\nbody", "a.eml", config).startswith("# (untitled)\n")

    def test_encoded_subject(self):
        markdown = convert("Subject: =?UTF-8?Q?R=C3=A9union_demain?=\n\nok", "r.eml")
        assert markdown.startswith("# Réunion demain\n")

    def test_folded_subject(self):
        markdown = convert("Subject: part one\n  part two\n\nok", "f.eml")
        assert markdown.startswith("# part one part two\n")

    def test_crlf_message(self):
        raw = "Subject: CRLF\r\nFrom: a@example.com\r\n\r\nLine one\r\nLine two\r\n"
        assert _message_section(convert(raw, "crlf.eml")) == "Line one\nLine two\n\n"

    def test_quoted_printable_body(self):
        raw = (
            "Content-Type: text/plain; charset=utf-8\n"
            "Content-Transfer-Encoding: quoted-printable\n"
            "\n"
            "Caf=C3=A9 au lait=\n"
            ", s'il vous pla=C3=AEt"
        )
        assert "Café au lait, s'il vous plaît" in convert(raw, "qp.eml")

    @pytest.mark.parametrize(
        ("encoding", "payload"),
        [("quoted-printable", "Caf=C3=A9"), ("base64", "Q2Fmw6k=")],
    )
    def test_unknown_charset_decodes_as_utf8(self, encoding, payload):
        raw = (
            "Content-Type: text/plain; charset=x-bogus\n"
            f"Content-Transfer-Encoding: {encoding}\n\n{payload}"
        )
        assert _message_section(convert(raw, "bogus.eml")) == "Café\n\n"

    def test_base64_utf8_body(self):
        raw = build_eml(plain="Grüße aus Köln", charset="utf-8")
        assert "Content-Transfer-Encoding: base64" in raw
        assert "Grüße aus Köln" in convert(raw, "b64.eml")

    def test_single_part_html(self, html_only_eml):
        markdown = convert(html_only_eml, "html.eml")
        assert "Hello, this is **HTML** body." in markdown
        assert "<p>" not in markdown

    def test_multipart_prefers_html(self, alternative_eml):
        message = _message_section(convert(alternative_eml, "alt.eml"))
        assert "**HTML**" in message
        assert "Plain version only." not in message

    def test_multipart_plain_when_configured(self, alternative_eml):
        config = EmlConverterConfig(prefer_html=False)
        message = _message_section(convert(alternative_eml, "alt.eml", config))
        assert "Plain version only." in message
        assert "**HTML**" not in message

    def test_attachment_not_listed(self, mixed_eml):
        markdown = convert(mixed_eml, "mixed.eml")
        assert "**HTML**" in markdown
        assert "## Attachments" not in markdown


class TestConvertErrors:
    def test_empty_input(self):
        with pytest.raises(ParseError) as exc_info:
            convert("", "empty.eml")
        assert exc_info.value.filename == "empty.eml"
        assert exc_info.value.code == ErrorCode.E_EML_INVALID_INPUT

    def test_whitespace_only_input(self):
        with pytest.raises(ParseError) as exc_info:
            convert("   ", "blank.eml")
        assert exc_info.value.code == ErrorCode.E_EML_EMPTY_INPUT
        assert str(exc_info.value) == 'Failed to parse EML file "blank.eml": EML file is empty'

    def test_non_text_input(self):
        with pytest.raises(ParseError):
            convert(b"Subject: bytes\n\nbody", "bytes.eml")  # type: ignore[arg-type]

    def test_unexpected_failure_wrapped(self):
        with patch("emlkit.converter.parse_message", side_effect=RuntimeError("boom")):
            with pytest.raises(ParseError) as exc_info:
                convert("Subject: x\n\ny", "bad.eml")
        err = exc_info.value
        assert err.reason == "boom"
        assert err.code == ErrorCode.E_EML_PARSE_FAILED
        assert isinstance(err.__cause__, RuntimeError)
        assert 'Failed to parse EML file "bad.eml": boom' == str(err)

    def test_bad_encoding_does_not_raise(self):
        raw = "Content-Type: text/plain; charset=utf-8\nContent-Transfer-Encoding: base64\n\n%%% not base64 %%%"
        assert "%%% not base64 %%%" in convert(raw, "bad64.eml")


class TestEMLConverterParse:
    def setup_method(self):
        self.converter = EMLConverter()

    def test_body_source_plain(self, plain_eml):
        assert self.converter.parse(plain_eml).body_source == BodySource.PLAIN_TEXT

    def test_body_source_html(self, alternative_eml):
        assert self.converter.parse(alternative_eml).body_source == BodySource.HTML_CONVERTED

    def test_body_source_empty(self, nested_eml):
        data = self.converter.parse(nested_eml)
        assert data.body_source == BodySource.EMPTY
        assert data.body == "No message content found"
        assert data.nested_multipart is True

    def test_headers_kept(self, plain_eml):
        data = self.converter.parse(plain_eml)
        assert data.headers["subject"] == "Test Subject"
        assert data.attachments == []

    def test_no_state_between_messages(self, plain_eml, html_only_eml):
        first = self.converter.parse(html_only_eml)
        second = self.converter.parse(plain_eml)
        assert first.body_source == BodySource.HTML_CONVERTED
        assert second.body_source == BodySource.PLAIN_TEXT

    def test_custom_charset_decoder(self):
        class RecordingDecoder:
            def __init__(self):
                self.calls = []

            def decode(self, data, charset, errors="strict"):
                self.calls.append(charset)
                return data.decode("latin-1")

            def is_supported(self, charset):
                return charset == "x-custom"

        decoder = RecordingDecoder()
        converter = EMLConverter(decoder=decoder)
        data = converter.parse(
            "Content-Type: text/plain; charset=x-custom\n"
            "Content-Transfer-Encoding: quoted-printable\n\nA=42C"
        )
        assert data.body == "ABC"
        assert decoder.calls == ["x-custom"]


class TestMalformedCharsets:
    def test_null_in_encoded_word_charset_left_as_is(self):
        markdown = convert("Subject: =?utf\x00x?Q?Hi?= tail\n\nbody", "n.eml")
        assert markdown.startswith("# =?utf\x00x?Q?Hi?= tail\n")

    def test_null_in_body_charset_falls_back(self):
        raw = (
            "Content-Type: text/plain; charset=ut\x00f\n"
            "Content-Transfer-Encoding: quoted-printable\n\nCaf=C3=A9"
        )
        assert _message_section(convert(raw, "n.eml")) == "Café\n\n"

    def test_lone_surrogate_body_kept(self):
        raw = "Content-Type: text/plain; charset=iso-8859-1\n\nbad \ud800 char"
        assert "bad \ud800 char" in convert(raw, "s.eml")
