"""Pre-flight checks for email files.

Validates extension, file size, and empty files before any conversion
begins.
"""

from __future__ import annotations

import logging
import os

from emlkit.config import EmlConverterConfig
from emlkit.errors import ConversionIssue, ErrorCode

logger = logging.getLogger("emlkit")

_ALLOWED_EXTENSIONS = {".eml"}


class EmlSecurityScanner:
    """Run pre-flight checks on an ``.eml`` file.

    Returns a list of issues.  Fatal issues (``E_*`` codes) mean the file
    should not be converted.
    """

    def __init__(self, config: EmlConverterConfig) -> None:
        self.config = config

    def scan(self, file_path: str) -> list[ConversionIssue]:
        """Run all pre-flight checks.

        Returns
        -------
        list[ConversionIssue]
            Issues found, at most one since every check is fatal.
        """
        filename = os.path.basename(file_path)
        ext = os.path.splitext(file_path)[1].lower()

        # 1. Extension whitelist
        if ext not in _ALLOWED_EXTENSIONS:
            return [
                self._issue(
                    ErrorCode.E_EML_UNSUPPORTED_FORMAT,
                    f"Unsupported file extension '{ext}'. Allowed: {sorted(_ALLOWED_EXTENSIONS)}",
                    filename,
                )
            ]

        # 2. File size
        try:
            file_size = os.path.getsize(file_path)
        except OSError as exc:
            return [self._issue(ErrorCode.E_EML_FILE_CORRUPT, f"Cannot read file: {exc}", filename)]

        issues = self.check_size(file_size, filename)
        if issues:
            return issues

        # 3. Empty file
        if file_size == 0:
            return [self._issue(ErrorCode.E_EML_FILE_CORRUPT, "File is empty (0 bytes)", filename)]

        return []

    def check_size(self, size: int, filename: str) -> list[ConversionIssue]:
        """Check a payload size against the configured limit."""
        max_bytes = self.config.max_file_size_mb * 1024 * 1024
        if size > max_bytes:
            return [
                self._issue(
                    ErrorCode.E_EML_TOO_LARGE,
                    f"File size {size} bytes exceeds limit of {max_bytes} bytes",
                    filename,
                )
            ]
        return []

    @staticmethod
    def _issue(code: ErrorCode, message: str, filename: str) -> ConversionIssue:
        return ConversionIssue(code=code, message=message, stage="security", filename=filename)
