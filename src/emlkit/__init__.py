"""emlkit -- EML (RFC 5322 + MIME) to Markdown converter.

Re-exports all public types: router, converter, config, models, errors,
transcoder, charset collaborator, and packaging helpers.
"""

from emlkit.charset import CharsetDecoder, CodecRegistryDecoder
from emlkit.config import EmlConverterConfig
from emlkit.converter import EMLConverter, convert
from emlkit.errors import ConversionIssue, ErrorCode, ParseError
from emlkit.html_markdown import html_to_markdown
from emlkit.models import (
    AttachmentInfo,
    BatchResult,
    BodySource,
    ConvertedFile,
    EmailData,
    EmailMetadata,
    MimePart,
    ProcessingResult,
)
from emlkit.packaging import (
    markdown_filename,
    merge_documents,
    write_archive,
    write_markdown_files,
    write_merged,
)
from emlkit.router import EmlRouter
from emlkit.security import EmlSecurityScanner

__all__ = [
    # Entry points
    "convert",
    "EMLConverter",
    "EmlRouter",
    # Config
    "EmlConverterConfig",
    # Errors
    "ErrorCode",
    "ConversionIssue",
    "ParseError",
    # Models
    "BodySource",
    "MimePart",
    "AttachmentInfo",
    "EmailData",
    "ConvertedFile",
    "EmailMetadata",
    "ProcessingResult",
    "BatchResult",
    # Transcoder
    "html_to_markdown",
    # Charset
    "CharsetDecoder",
    "CodecRegistryDecoder",
    # Packaging
    "markdown_filename",
    "merge_documents",
    "write_merged",
    "write_archive",
    "write_markdown_files",
    # Security
    "EmlSecurityScanner",
]
