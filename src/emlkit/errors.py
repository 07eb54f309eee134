"""Error codes, structured issue model, and the fatal ``ParseError``.

``ErrorCode`` contains every emlkit error/warning code.  ``ConversionIssue``
is the serialisable record attached to processing results, and
``ParseError`` is the exception raised by :func:`emlkit.converter.convert`
when a message cannot be turned into Markdown at all.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes for emlkit.

    Fatal codes use an ``E_`` prefix; warnings use ``W_``.
    Values equal their names for stable log/alerting strings.
    """

    # Fatal errors
    E_EML_UNSUPPORTED_FORMAT = "E_EML_UNSUPPORTED_FORMAT"
    E_EML_TOO_LARGE = "E_EML_TOO_LARGE"
    E_EML_FILE_CORRUPT = "E_EML_FILE_CORRUPT"
    E_EML_EMPTY_INPUT = "E_EML_EMPTY_INPUT"
    E_EML_INVALID_INPUT = "E_EML_INVALID_INPUT"
    E_EML_PARSE_FAILED = "E_EML_PARSE_FAILED"

    # Warnings (non-fatal)
    W_EML_NO_SUBJECT = "W_EML_NO_SUBJECT"
    W_EML_NO_DATE = "W_EML_NO_DATE"
    W_EML_NO_BODY = "W_EML_NO_BODY"
    W_EML_HTML_CONVERTED = "W_EML_HTML_CONVERTED"
    W_EML_NESTED_MULTIPART = "W_EML_NESTED_MULTIPART"
    W_EML_SKIPPED_NOT_EML = "W_EML_SKIPPED_NOT_EML"


class ConversionIssue(BaseModel):
    """Structured error or warning produced while converting one file."""

    code: ErrorCode
    message: str
    stage: str | None = None
    recoverable: bool = False
    filename: str | None = None


class ParseError(Exception):
    """A message could not be converted.

    Carries the offending *filename* and the underlying *reason* so callers
    can report which file failed and why.
    """

    def __init__(
        self,
        filename: str,
        reason: str,
        code: ErrorCode = ErrorCode.E_EML_PARSE_FAILED,
    ) -> None:
        self.filename = filename
        self.reason = reason
        self.code = code
        super().__init__(f'Failed to parse EML file "{filename}": {reason}')

    def to_issue(self, stage: str = "convert") -> ConversionIssue:
        """Return this failure as a :class:`ConversionIssue`."""
        return ConversionIssue(
            code=self.code,
            message=str(self),
            stage=stage,
            filename=self.filename,
        )
