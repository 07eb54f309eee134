"""Shared fixtures for emlkit tests."""

from __future__ import annotations

from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path

import pytest


# ---------------------------------------------------------------------------
# EML builders
# ---------------------------------------------------------------------------

PLAIN_BODY = "Plain version only."
HTML_BODY = "<html><body><p>Hello, this is <strong>HTML</strong> body.</p></body></html>"


def build_eml(
    *,
    plain: str | None = PLAIN_BODY,
    html: str | None = None,
    attachment: bool = False,
    charset: str = "us-ascii",
    subject: str | None = "Test Subject",
) -> str:
    """Build an EML message as text using the stdlib MIME builders."""
    if plain is not None and html is not None:
        msg = MIMEMultipart("alternative")
        msg.attach(MIMEText(plain, "plain", charset))
        msg.attach(MIMEText(html, "html", charset))
    elif html is not None:
        msg = MIMEText(html, "html", charset)
    else:
        msg = MIMEText(plain or "", "plain", charset)

    if attachment:
        outer = MIMEMultipart("mixed")
        if isinstance(msg, MIMEMultipart):
            for part in msg.get_payload():
                outer.attach(part)
        else:
            outer.attach(msg)

        att = MIMEBase("application", "octet-stream")
        att.set_payload(b"\x89PNG\r\n\x1a\n" + b"\x00" * 50)
        encoders.encode_base64(att)
        att.add_header("Content-Disposition", "attachment", filename="image.png")
        outer.attach(att)
        msg = outer

    msg["From"] = "sender@example.com"
    msg["To"] = "recipient@example.com"
    msg["Date"] = "Mon, 17 Feb 2026 12:00:00 +0000"
    if subject is not None:
        msg["Subject"] = subject

    return msg.as_bytes().decode("ascii")


NESTED_EML = """\
From: sender@example.com
To: recipient@example.com
Subject: Nested
Content-Type: multipart/mixed; boundary="outer"

--outer
Content-Type: multipart/alternative; boundary="inner"

--inner
Content-Type: text/plain

Inner plain
--inner--
--outer
Content-Type: application/pdf; name="doc.pdf"
Content-Transfer-Encoding: base64

JVBERi0xLjQK
--outer--
"""


@pytest.fixture
def plain_eml() -> str:
    return build_eml()


@pytest.fixture
def html_only_eml() -> str:
    return build_eml(plain=None, html=HTML_BODY)


@pytest.fixture
def alternative_eml() -> str:
    """Plain + HTML alternatives; only the HTML part has bold text."""
    return build_eml(plain=PLAIN_BODY, html=HTML_BODY)


@pytest.fixture
def mixed_eml() -> str:
    """Plain + HTML + binary attachment, flattened into multipart/mixed."""
    return build_eml(plain=PLAIN_BODY, html=HTML_BODY, attachment=True)


@pytest.fixture
def nested_eml() -> str:
    return NESTED_EML


# ---------------------------------------------------------------------------
# Files on disk
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_eml_file(tmp_path: Path, plain_eml: str) -> str:
    p = tmp_path / "test.eml"
    p.write_text(plain_eml)
    return str(p)


@pytest.fixture
def sample_html_file(tmp_path: Path, html_only_eml: str) -> str:
    p = tmp_path / "test_html.eml"
    p.write_text(html_only_eml)
    return str(p)
