"""Pydantic models and enumerations for emlkit.

Contains the parse-tree type ``MimePart``, the derived ``EmailData``
summary, the caller-facing ``ConvertedFile`` output unit, and the result
models returned by :class:`~emlkit.router.EmlRouter`.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from emlkit.errors import ConversionIssue

__all__ = [
    "BodySource",
    "MimePart",
    "AttachmentInfo",
    "EmailData",
    "ConvertedFile",
    "EmailMetadata",
    "ProcessingResult",
    "BatchResult",
]


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class BodySource(str, Enum):
    """How the final body text was obtained."""

    PLAIN_TEXT = "plain_text"
    HTML_CONVERTED = "html_converted"
    EMPTY = "empty"


# ---------------------------------------------------------------------------
# Parse tree
# ---------------------------------------------------------------------------


class MimePart(BaseModel):
    """One header+body unit of a message.

    ``body`` is the raw, not yet transfer-decoded text.  ``parts`` holds the
    children of a multipart root; children never carry children of their
    own (nested multiparts are not expanded).
    """

    headers: dict[str, str] = {}
    body: str = ""
    content_type: str | None = None
    encoding: str | None = None
    boundary: str | None = None
    parts: list[MimePart] = []

    @property
    def is_multipart(self) -> bool:
        return self.boundary is not None


# ---------------------------------------------------------------------------
# Message summary
# ---------------------------------------------------------------------------


class AttachmentInfo(BaseModel):
    """Attachment listing entry. Attachment bodies are never extracted."""

    filename: str
    content_type: str
    size: int

    @property
    def size_kb(self) -> int:
        # Half-up rounding, matching how sizes are shown to users.
        return int(self.size / 1024 + 0.5)


class EmailData(BaseModel):
    """Read-only summary of a parsed message, ready for Markdown assembly."""

    headers: dict[str, str] = {}
    subject: str
    from_address: str
    to_address: str
    date: str
    body: str
    attachments: list[AttachmentInfo] = []
    body_source: BodySource = BodySource.PLAIN_TEXT
    nested_multipart: bool = False


class ConvertedFile(BaseModel):
    """One successfully converted ``.eml`` input."""

    name: str
    content: str
    original_name: str


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class EmailMetadata(BaseModel):
    """Header summary reported alongside a processing result."""

    subject: str | None = None
    from_address: str | None = None
    to_address: str | None = None
    date: str | None = None
    body_source: BodySource = BodySource.PLAIN_TEXT
    header_count: int = 0


class ProcessingResult(BaseModel):
    """Final result of processing one email file through the pipeline."""

    file_path: str
    converted: ConvertedFile | None = None
    email_metadata: EmailMetadata | None = None
    errors: list[str] = []
    warnings: list[str] = []
    error_details: list[ConversionIssue] = []
    processing_time_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.converted is not None and not self.errors


class BatchResult(BaseModel):
    """Per-file outcome of a batch conversion, in input order."""

    converted: list[ConvertedFile] = []
    failures: list[ConversionIssue] = []
    skipped: list[str] = []

    @property
    def ok(self) -> bool:
        return not self.failures
